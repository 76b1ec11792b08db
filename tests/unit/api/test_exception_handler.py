"""
Unit tests for the API exception handler.
"""
from decimal import Decimal

import pytest
from rest_framework.exceptions import NotAuthenticated, ValidationError

from api.exceptions import STATUS_BY_KIND, custom_exception_handler, status_for
from core.domain.exceptions import (
    AlreadyProcessedError,
    ConcurrentModificationError,
    DailyLimitExceededError,
    ErrorKind,
    InsufficientFundsError,
    InvalidStateError,
    LicenseKeyNotFoundError,
    MissingIdempotencyKeyError,
    NotAuthorizedError,
    OperationInProgressError,
    QuotaExceededError,
    StorageError,
)
from core.middleware.metrics import normalize_endpoint


class TestStatusMapping:
    """Tests for the ErrorKind to HTTP status table."""

    def test_every_kind_mapped(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)

    @pytest.mark.parametrize(
        "exc,expected",
        [
            (NotAuthorizedError(), 403),
            (LicenseKeyNotFoundError(), 404),
            (QuotaExceededError(), 422),
            (InvalidStateError(), 409),
            (MissingIdempotencyKeyError(), 400),
            (AlreadyProcessedError(), 409),
            (OperationInProgressError(), 429),
            (InsufficientFundsError(Decimal("1"), Decimal("2")), 422),
            (DailyLimitExceededError(Decimal("0")), 422),
            (ConcurrentModificationError(), 409),
            (StorageError(), 503),
        ],
    )
    def test_status_for(self, exc, expected):
        assert status_for(exc) == expected


class TestCustomExceptionHandler:
    """Tests for custom_exception_handler."""

    def test_domain_exception_body(self):
        response = custom_exception_handler(QuotaExceededError(5), {})
        assert response.status_code == 422
        assert response.data == {
            "error": {
                "code": "QUOTA_EXCEEDED",
                "message": "Límite de 5 llaves totales alcanzado para esta aplicación",
            }
        }

    def test_validation_error_keeps_fields(self):
        response = custom_exception_handler(ValidationError({"amount": ["Requerido"]}), {})
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID"
        assert response.data["error"]["fields"] == {"amount": ["Requerido"]}

    def test_api_exception_detail(self):
        response = custom_exception_handler(NotAuthenticated(), {})
        assert response.status_code in (401, 403)
        assert response.data["error"]["code"] == "NOT_AUTHENTICATED"

    def test_unexpected_error(self):
        response = custom_exception_handler(RuntimeError("boom"), {})
        assert response.status_code == 500
        assert response.data["error"]["code"] == "INTERNAL_ERROR"
        assert "boom" not in str(response.data)


class TestNormalizeEndpoint:
    """Tests for metric label normalization."""

    def test_collapses_ids(self):
        path = "/api/v1/keys/products/3f2b8c1e-9a4d-4c2e-8f1a-2b3c4d5e6f70/keys"
        assert normalize_endpoint(path) == "/api/v1/keys/products/{id}/keys"

    def test_numeric_segment(self):
        assert normalize_endpoint("/orders/42?x=1") == "/orders/{id}"
