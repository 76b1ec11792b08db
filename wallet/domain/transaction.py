"""
WalletTransaction domain entity and balance mutations.

Every balance change is recorded as a transaction keyed by
``(account_id, idempotency_key)``. A transaction moves
``pending -> completed`` when the balance changed and
``pending -> failed`` when it did not.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from core.domain.events import utcnow
from core.domain.value_objects import TransactionStatus, TransactionType


@dataclass(frozen=True)
class WalletTransaction:
    """
    WalletTransaction domain entity.

    ``amount`` is signed: negative for purchases, positive for reloads.
    """

    id: uuid.UUID
    account_id: uuid.UUID
    type: TransactionType
    amount: Decimal
    status: TransactionStatus
    idempotency_key: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    balance_after: Optional[Decimal] = None

    def __post_init__(self):
        """Validate transaction entity."""
        if not self.idempotency_key:
            raise ValueError("Idempotency key is required")
        if self.type == TransactionType.PURCHASE and self.amount > 0:
            raise ValueError("Purchase amounts must be negative")
        if self.type == TransactionType.RELOAD and self.amount < 0:
            raise ValueError("Reload amounts must be positive")

    @classmethod
    def create_pending(
        cls,
        account_id: uuid.UUID,
        type: TransactionType,  # pylint: disable=redefined-builtin
        amount: Decimal,
        idempotency_key: str,
        description: str = "",
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        now: Optional[datetime] = None,
        transaction_id: Optional[uuid.UUID] = None,
    ) -> "WalletTransaction":
        """
        Create a new pending transaction.

        Args:
            account_id: Account UUID
            type: Reload or purchase
            amount: Signed amount
            idempotency_key: Caller-supplied key
            description: Human-readable description
            reference_type: Kind of purchased entity, if any
            reference_id: Identifier of the purchased entity, if any
            now: Creation time (defaults to now)
            transaction_id: Optional UUID (generated if not provided)

        Returns:
            WalletTransaction in the pending state
        """
        now = now or utcnow()
        return cls(
            id=transaction_id or uuid.uuid4(),
            account_id=account_id,
            type=type,
            amount=amount,
            status=TransactionStatus.PENDING,
            idempotency_key=idempotency_key,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_completed(self) -> bool:
        return self.status == TransactionStatus.COMPLETED

    def complete(self, balance_after: Decimal, now: Optional[datetime] = None) -> "WalletTransaction":
        """Mark as completed with the resulting balance."""
        return replace(
            self,
            status=TransactionStatus.COMPLETED,
            balance_after=balance_after,
            updated_at=now or utcnow(),
        )

    def fail(self, now: Optional[datetime] = None) -> "WalletTransaction":
        """Mark as failed; the balance was left untouched."""
        return replace(self, status=TransactionStatus.FAILED, updated_at=now or utcnow())

    def is_fresh_pending(self, now: datetime, window: timedelta) -> bool:
        """Pending and touched within ``window`` of ``now``."""
        return self.status == TransactionStatus.PENDING and self.updated_at > now - window

    def is_reclaimable(self, stale_before: datetime) -> bool:
        """
        Whether a retry may take over this key.

        Failed attempts and pending rows abandoned before ``stale_before``
        can be reused; completed ones never.
        """
        if self.status == TransactionStatus.FAILED:
            return True
        return self.status == TransactionStatus.PENDING and self.updated_at < stale_before


@dataclass(frozen=True)
class BalanceMutation:
    """A request to move money in or out of one account."""

    account_id: uuid.UUID
    type: TransactionType
    amount: Decimal
    idempotency_key: str
    description: str = ""
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    max_balance: Optional[Decimal] = None

    @property
    def is_debit(self) -> bool:
        return self.type == TransactionType.PURCHASE

    @property
    def signed_amount(self) -> Decimal:
        """Negative for debits."""
        return -self.amount if self.is_debit else self.amount

    def pending_transaction(self, now: Optional[datetime] = None) -> WalletTransaction:
        """The pending row that records this mutation."""
        return WalletTransaction.create_pending(
            account_id=self.account_id,
            type=self.type,
            amount=self.signed_amount,
            idempotency_key=self.idempotency_key,
            description=self.description,
            reference_type=self.reference_type,
            reference_id=self.reference_id,
            now=now,
        )


@dataclass(frozen=True)
class LedgerEntry:
    """Outcome of a successfully applied mutation."""

    transaction: WalletTransaction
    new_balance: Decimal
