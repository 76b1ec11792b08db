"""
Wallet limits and amount validation.
"""

from dataclasses import dataclass, fields
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain.exceptions import InvalidAmountError, format_amount
from core.domain.value_objects import has_at_most_two_decimals, quantize_amount, to_amount


@dataclass(frozen=True)
class WalletLimits:
    """Monetary caps and cooldown windows."""

    MIN_RELOAD_AMOUNT: Decimal = Decimal("1.00")
    MAX_RELOAD_AMOUNT: Decimal = Decimal("500.00")
    MAX_BALANCE: Decimal = Decimal("10000.00")
    MAX_DAILY_RELOAD: Decimal = Decimal("1000.00")
    MIN_PURCHASE_AMOUNT: Decimal = Decimal("0.01")
    RELOAD_COOLDOWN_SECONDS: float = 5
    PAYMENT_COOLDOWN_SECONDS: float = 3
    PENDING_WINDOW_SECONDS: float = 30

    @classmethod
    def from_mapping(cls, values: Optional[Dict[str, Any]]) -> "WalletLimits":
        """Build limits from a settings dict, ignoring unknown keys."""
        values = values or {}
        kwargs = {}
        for field in fields(cls):
            if field.name not in values:
                continue
            value = values[field.name]
            kwargs[field.name] = Decimal(str(value)) if field.type is Decimal else float(value)
        return cls(**kwargs)

    @property
    def pending_window(self) -> timedelta:
        return timedelta(seconds=self.PENDING_WINDOW_SECONDS)

    def validate_reload_amount(self, value: Any) -> Decimal:
        """
        Parse and check a reload amount.

        Raises:
            InvalidAmountError: If the amount is not a number, out of range,
                or carries sub-cent precision
        """
        amount = to_amount(value)
        if amount < self.MIN_RELOAD_AMOUNT:
            raise InvalidAmountError(
                f"El monto mínimo de recarga es {format_amount(self.MIN_RELOAD_AMOUNT)}"
            )
        if amount > self.MAX_RELOAD_AMOUNT:
            raise InvalidAmountError(
                f"El monto máximo de recarga es {format_amount(self.MAX_RELOAD_AMOUNT)}"
            )
        if not has_at_most_two_decimals(amount):
            raise InvalidAmountError("El monto debe tener máximo 2 decimales")
        return quantize_amount(amount)

    def validate_purchase_amount(self, value: Any) -> Decimal:
        """
        Parse and check a purchase amount.

        Raises:
            InvalidAmountError: If the amount is not a number, below the
                minimum, or carries sub-cent precision
        """
        amount = to_amount(value)
        if amount < self.MIN_PURCHASE_AMOUNT:
            raise InvalidAmountError("El monto de compra no es válido")
        if not has_at_most_two_decimals(amount):
            raise InvalidAmountError("El monto debe tener máximo 2 decimales")
        return quantize_amount(amount)
