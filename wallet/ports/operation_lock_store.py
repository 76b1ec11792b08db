"""
Operation lock store port (interface).

Short-lived keys that reject a repeated submission while the first one
is still cooling down.
"""
from abc import ABC, abstractmethod


class OperationLockStore(ABC):
    """Expiring set of in-flight operation keys."""

    @abstractmethod
    async def acquire(self, key: str, ttl_seconds: float) -> bool:
        """
        Take a key for ``ttl_seconds``.

        Args:
            key: Operation key
            ttl_seconds: How long the key stays taken

        Returns:
            True if the key was free, False if it is still held
        """
        pass

    @abstractmethod
    async def release(self, key: str) -> None:
        """
        Free a key before it expires.

        Args:
            key: Operation key
        """
        pass
