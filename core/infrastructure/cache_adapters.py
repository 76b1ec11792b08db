"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort (Redis in
dev/prod, local memory in tests).
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Cache outages are logged and treated as misses; nothing that
    depends on the cache for correctness should rely on it alone.
    """

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        try:
            value = await sync_to_async(cache.get)(key)
            logger.debug("Cache %s: %s", "hit" if value is not None else "miss", key)
            return value
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return None

    async def set(self, key: str, value: Any, timeout: Optional[float] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for no expiration)
        """
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
            logger.debug("Cache set: %s (timeout=%s)", key, timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)

    async def add(self, key: str, value: Any, timeout: Optional[float] = None) -> bool:
        """
        Set a value only if the key is absent.

        An unreachable cache reports the key as stored so a cache outage
        never blocks wallet operations; idempotency keys still guard them.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds (None for no expiration)

        Returns:
            True if the value was stored
        """
        try:
            return bool(await sync_to_async(cache.add)(key, value, timeout=timeout))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error adding to cache: %s", e, exc_info=True)
            return True

    async def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        try:
            await sync_to_async(cache.delete)(key)
            logger.debug("Cache delete: %s", key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
