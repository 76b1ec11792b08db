"""
WalletTransaction repository port (interface).

This defines the contract for transaction persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import uuid

from core.domain.value_objects import TransactionType
from wallet.domain.transaction import WalletTransaction


class IdempotencyKeyTaken(Exception):
    """
    The idempotency key already belongs to a transaction that cannot be
    reclaimed (completed, or pending and still fresh).
    """

    def __init__(self, existing: WalletTransaction):
        super().__init__(f"idempotency key held by a {existing.status} transaction")
        self.existing = existing


class TransactionRepository(ABC):
    """Abstract repository for WalletTransaction entities."""

    @abstractmethod
    async def find_by_idempotency_key(
        self, account_id: uuid.UUID, idempotency_key: str
    ) -> Optional[WalletTransaction]:
        """
        Find the transaction recorded under an idempotency key.

        Args:
            account_id: Account UUID
            idempotency_key: Caller-supplied key

        Returns:
            WalletTransaction or None if the key is unused
        """
        pass

    @abstractmethod
    async def claim(
        self, transaction: WalletTransaction, stale_before: datetime
    ) -> WalletTransaction:
        """
        Insert a pending transaction, or take over a reclaimable one.

        Args:
            transaction: Pending transaction to record
            stale_before: Pending rows last touched before this are abandoned

        Returns:
            The pending transaction as stored (keeps the existing id on reclaim)

        Raises:
            IdempotencyKeyTaken: If the key is held by a live transaction
        """
        pass

    @abstractmethod
    async def save(self, transaction: WalletTransaction) -> WalletTransaction:
        """
        Persist status changes of a transaction.

        Args:
            transaction: WalletTransaction to save

        Returns:
            Saved transaction
        """
        pass

    @abstractmethod
    async def sum_completed(
        self,
        account_id: uuid.UUID,
        type: TransactionType,  # pylint: disable=redefined-builtin
        since: Optional[datetime] = None,
    ) -> Decimal:
        """
        Total of completed transactions of one type.

        Args:
            account_id: Account UUID
            type: Transaction type to add up
            since: Only count transactions created at or after this time

        Returns:
            Sum of signed amounts (0 if none)
        """
        pass

    @abstractmethod
    async def list_completed(
        self, account_id: uuid.UUID, limit: int, offset: int
    ) -> List[WalletTransaction]:
        """
        Completed transactions, newest first.

        Args:
            account_id: Account UUID
            limit: Page size
            offset: Rows to skip

        Returns:
            List of WalletTransaction entities
        """
        pass

    @abstractmethod
    async def fail_stale_pending(self, before: datetime) -> int:
        """
        Mark pending transactions last touched before ``before`` as failed.

        Returns:
            Number of transactions marked failed
        """
        pass
