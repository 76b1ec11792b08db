"""
Unit tests for value objects and domain exceptions.
"""
from decimal import Decimal

import pytest

from core.domain.exceptions import (
    DailyLimitExceededError,
    ErrorKind,
    InsufficientFundsError,
    InvalidAmountError,
    ProductNotFoundError,
    QuotaExceededError,
    format_amount,
)
from core.domain.value_objects import (
    LicenseKeyState,
    TransactionStatus,
    TransactionType,
    quantize_amount,
)


class TestEnums:
    """Tests for enum value objects."""

    def test_str(self):
        assert str(LicenseKeyState.REDEEMED) == "redeemed"
        assert str(TransactionStatus.PENDING) == "pending"
        assert str(TransactionType.PURCHASE) == "purchase"

    def test_from_value(self):
        assert LicenseKeyState("deactivated") is LicenseKeyState.DEACTIVATED


class TestAmounts:
    """Tests for amount helpers."""

    def test_quantize(self):
        assert quantize_amount(Decimal("2.005")) == Decimal("2.01")

    def test_format_amount(self):
        assert format_amount(Decimal("5")) == "$5.00"


class TestDomainExceptions:
    """Tests for domain exception kinds and messages."""

    def test_kinds(self):
        assert ProductNotFoundError().kind == ErrorKind.NOT_FOUND
        assert InvalidAmountError().kind == ErrorKind.INVALID_ARGUMENT
        assert QuotaExceededError().kind == ErrorKind.QUOTA_EXCEEDED

    def test_codes(self):
        assert ProductNotFoundError().code == "PRODUCT_NOT_FOUND"
        assert InvalidAmountError().code == "INVALID_AMOUNT"

    def test_quota_message(self):
        assert QuotaExceededError(5).message == (
            "Límite de 5 llaves totales alcanzado para esta aplicación"
        )

    def test_insufficient_funds_message(self):
        error = InsufficientFundsError(Decimal("3"), Decimal("4.5"))
        assert error.message == "Fondos insuficientes. Tu balance es $3.00 y el precio es $4.50."

    def test_daily_limit_message(self):
        error = DailyLimitExceededError(Decimal("250"))
        assert "Puedes recargar hasta $250.00 más hoy." in error.message

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_kind_str(self, kind):
        assert str(kind) == kind.value
