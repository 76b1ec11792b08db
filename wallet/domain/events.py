"""
Wallet domain events.
"""

import uuid
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class PaymentProcessed(DomainEvent):
    """Event raised when a payment debits an account."""

    def __init__(
        self,
        transaction_id: uuid.UUID,
        account_id: uuid.UUID,
        amount: Decimal,
        new_balance: Decimal,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
    ):
        super().__init__(**self.envelope(account_id))
        self.transaction_id = transaction_id
        self.account_id = account_id
        self.amount = amount
        self.new_balance = new_balance
        self.reference_type = reference_type
        self.reference_id = reference_id

    def payload(self) -> Dict[str, Any]:
        return {
            "transaction_id": str(self.transaction_id),
            "amount": str(self.amount),
            "new_balance": str(self.new_balance),
            "reference_type": self.reference_type,
            "reference_id": self.reference_id,
        }


class WalletReloaded(DomainEvent):
    """Event raised when a reload credits an account."""

    def __init__(
        self,
        transaction_id: uuid.UUID,
        account_id: uuid.UUID,
        amount: Decimal,
        new_balance: Decimal,
    ):
        super().__init__(**self.envelope(account_id))
        self.transaction_id = transaction_id
        self.account_id = account_id
        self.amount = amount
        self.new_balance = new_balance

    def payload(self) -> Dict[str, Any]:
        return {
            "transaction_id": str(self.transaction_id),
            "amount": str(self.amount),
            "new_balance": str(self.new_balance),
        }
