"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from core.domain.exceptions import InvalidAmountError

TWO_PLACES = Decimal("0.01")
# Largest value a DecimalField(max_digits=12, decimal_places=2) holds.
MAX_AMOUNT = Decimal("9999999999.99")


class LicenseKeyState(Enum):
    """License key lifecycle state."""

    ACTIVE = "active"
    REDEEMED = "redeemed"
    DEACTIVATED = "deactivated"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class TransactionStatus(Enum):
    """Wallet transaction status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class TransactionType(Enum):
    """Wallet transaction type."""

    RELOAD = "reload"
    PURCHASE = "purchase"

    def __str__(self) -> str:
        """Return type as string."""
        return self.value


def to_amount(value: Any) -> Decimal:
    """
    Convert caller input into a Decimal amount.

    Floats go through ``str`` so ``10.1`` stays ``10.1`` instead of its
    binary expansion. Booleans, NaN, infinities and values too large to store are
    rejected.

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError()
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError() from None
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        raise InvalidAmountError()
    return amount


def has_at_most_two_decimals(amount: Decimal) -> bool:
    """Check that an amount carries no sub-cent precision."""
    return amount == amount.quantize(TWO_PLACES)


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to cents."""
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
