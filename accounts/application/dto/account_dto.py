"""
Account DTOs (Data Transfer Objects).

DTOs are used to transfer data between layers.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class AccountStatusDTO:
    """DTO for the limited-account status shown to the account holder."""

    is_limited: bool
    total_reloaded: Decimal
    unlock_amount: Decimal
    remaining: Decimal
    can_unlock: bool
    restricted_operations: List[str] = field(default_factory=list)
