"""
Wallet DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from wallet.domain.transaction import WalletTransaction


@dataclass
class PaymentResultDTO:
    """DTO for a processed payment."""

    transaction_id: uuid.UUID
    new_balance: Decimal


@dataclass
class ReloadResultDTO:
    """DTO for a processed reload."""

    transaction_id: uuid.UUID
    new_balance: Decimal
    account_unlocked: bool = False
    unlock_message: Optional[str] = None


@dataclass
class BalanceDTO:
    """DTO for an account balance."""

    account_id: uuid.UUID
    balance: Decimal
    is_limited: bool


@dataclass
class TransactionDTO:
    """DTO for a transaction history item."""

    id: uuid.UUID
    type: str
    amount: Decimal
    status: str
    description: str
    reference_type: Optional[str]
    reference_id: Optional[str]
    balance_after: Optional[Decimal]
    created_at: datetime

    @classmethod
    def from_entity(cls, transaction: WalletTransaction) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            type=transaction.type.value,
            amount=transaction.amount,
            status=transaction.status.value,
            description=transaction.description,
            reference_type=transaction.reference_type,
            reference_id=transaction.reference_id,
            balance_after=transaction.balance_after,
            created_at=transaction.created_at,
        )
