"""
Account repository port (interface).

This defines the contract for ledger account persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
import uuid

from accounts.domain.account import LedgerAccount


class AccountRepository(ABC):
    """
    Abstract repository for LedgerAccount entities.

    Balances are never written with a plain save; callers go through
    ``compare_and_set_balance`` or the atomic ledger.
    """

    @abstractmethod
    async def save(self, account: LedgerAccount) -> LedgerAccount:
        """
        Save an account entity.

        Args:
            account: LedgerAccount entity to save

        Returns:
            Saved account entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, account_id: uuid.UUID) -> Optional[LedgerAccount]:
        """
        Find an account by ID.

        Args:
            account_id: Account UUID

        Returns:
            LedgerAccount entity or None if not found
        """
        pass

    @abstractmethod
    async def compare_and_set_balance(
        self, account_id: uuid.UUID, expected: Decimal, new_balance: Decimal
    ) -> bool:
        """
        Replace the balance only if it still equals ``expected``.

        Args:
            account_id: Account UUID
            expected: Balance read earlier by the caller
            new_balance: Balance to write

        Returns:
            True if the balance was written
        """
        pass

    @abstractmethod
    async def set_unlocked(self, account_id: uuid.UUID) -> bool:
        """
        Lift the limited flag.

        Args:
            account_id: Account UUID

        Returns:
            True if this call changed the flag, False if it was already lifted
        """
        pass
