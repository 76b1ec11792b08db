"""
Unit tests for the operation lock stores.
"""
import pytest

from core.infrastructure.cache import CachePort
from wallet.infrastructure.lock_stores import CacheOperationLockStore, InMemoryOperationLockStore


class DictCache(CachePort):
    """Cache without expiry, enough to observe add/delete."""

    def __init__(self):
        self.values = {}
        self.timeouts = {}

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, timeout=None):
        self.values[key] = value

    async def add(self, key, value, timeout=None):
        if key in self.values:
            return False
        self.values[key] = value
        self.timeouts[key] = timeout
        return True

    async def delete(self, key):
        self.values.pop(key, None)


@pytest.mark.asyncio
class TestInMemoryOperationLockStore:
    """Tests for InMemoryOperationLockStore."""

    async def test_acquire_and_expire(self, clock):
        store = InMemoryOperationLockStore(clock=clock.monotonic)
        assert await store.acquire("reload:a", 5) is True
        assert await store.acquire("reload:a", 5) is False
        assert await store.acquire("reload:b", 5) is True

        clock.advance(seconds=5)
        assert await store.acquire("reload:a", 5) is True

    async def test_release(self, clock):
        store = InMemoryOperationLockStore(clock=clock.monotonic)
        await store.acquire("k", 30)
        await store.release("k")
        assert await store.acquire("k", 30) is True

    async def test_zero_ttl_never_holds(self, clock):
        store = InMemoryOperationLockStore(clock=clock.monotonic)
        assert await store.acquire("k", 0) is True
        assert await store.acquire("k", 0) is True
        assert len(store) == 0

    async def test_sweeps_expired(self, clock):
        store = InMemoryOperationLockStore(clock=clock.monotonic)
        for index in range(store.SWEEP_THRESHOLD + 1):
            await store.acquire(f"k{index}", 1)
        clock.advance(seconds=2)
        await store.acquire("fresh", 1)
        assert len(store) == 1


@pytest.mark.asyncio
class TestCacheOperationLockStore:
    """Tests for CacheOperationLockStore."""

    async def test_uses_add_with_prefix(self):
        cache = DictCache()
        store = CacheOperationLockStore(cache=cache)

        assert await store.acquire("payment:a:k", 3) is True
        assert await store.acquire("payment:a:k", 3) is False
        assert cache.timeouts["wallet:op:payment:a:k"] == 3

        await store.release("payment:a:k")
        assert await store.acquire("payment:a:k", 3) is True

    async def test_zero_ttl_skips_cache(self):
        cache = DictCache()
        store = CacheOperationLockStore(cache=cache)
        assert await store.acquire("k", 0) is True
        assert cache.values == {}
