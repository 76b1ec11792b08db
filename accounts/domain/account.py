"""
LedgerAccount domain entity.

A ledger account holds a non-negative balance. The balance is only ever
changed by the wallet ledger, always together with a transaction row.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from core.domain.events import utcnow
from core.domain.value_objects import quantize_amount


@dataclass(frozen=True)
class LedgerAccount:
    """
    LedgerAccount domain entity.

    New accounts start limited; a limited account cannot buy, sell or
    trade until it has reloaded enough money.
    """

    id: uuid.UUID
    display_name: str
    balance: Decimal
    is_limited: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate account entity."""
        if self.balance < 0:
            raise ValueError("Balance cannot be negative")

    @classmethod
    def create(
        cls,
        display_name: str,
        balance: Decimal = Decimal("0.00"),
        is_limited: bool = True,
        account_id: Optional[uuid.UUID] = None,
    ) -> "LedgerAccount":
        """
        Create a new LedgerAccount entity.

        Args:
            display_name: Name shown to other users
            balance: Opening balance
            is_limited: Whether the account starts restricted
            account_id: Optional UUID (generated if not provided)

        Returns:
            LedgerAccount entity instance
        """
        now = utcnow()
        return cls(
            id=account_id or uuid.uuid4(),
            display_name=display_name.strip(),
            balance=quantize_amount(Decimal(balance)),
            is_limited=is_limited,
            created_at=now,
            updated_at=now,
        )
