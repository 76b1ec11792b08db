"""
OperationLockStore adapters.

The cache-backed store is shared by every process that talks to the
same cache; the in-memory store is per process and takes an injectable
clock.
"""

import time
from typing import Callable, Dict

from core.infrastructure.cache import CachePort
from core.infrastructure.cache_adapters import cache_adapter
from wallet.ports.operation_lock_store import OperationLockStore


class CacheOperationLockStore(OperationLockStore):
    """Lock store on top of ``CachePort.add``."""

    def __init__(self, cache: CachePort = cache_adapter, prefix: str = "wallet:op:"):
        self.cache = cache
        self.prefix = prefix

    async def acquire(self, key: str, ttl_seconds: float) -> bool:
        if ttl_seconds <= 0:
            return True
        return await self.cache.add(self.prefix + key, "1", timeout=ttl_seconds)

    async def release(self, key: str) -> None:
        await self.cache.delete(self.prefix + key)


class InMemoryOperationLockStore(OperationLockStore):
    """Per-process lock store keyed by expiry time."""

    # Expired entries are swept once the map grows past this size.
    SWEEP_THRESHOLD = 1000

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expiry: Dict[str, float] = {}

    async def acquire(self, key: str, ttl_seconds: float) -> bool:
        now = self._clock()
        if len(self._expiry) > self.SWEEP_THRESHOLD:
            self._expiry = {k: v for k, v in self._expiry.items() if v > now}
        expires_at = self._expiry.get(key)
        if expires_at is not None and expires_at > now:
            return False
        if ttl_seconds > 0:
            self._expiry[key] = now + ttl_seconds
        return True

    async def release(self, key: str) -> None:
        self._expiry.pop(key, None)

    def __len__(self) -> int:
        return len(self._expiry)
