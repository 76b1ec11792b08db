"""
Integration tests for the wallet API.
"""

from decimal import Decimal

import pytest
from django.conf import settings
from django.test import override_settings
from django.urls import reverse
from rest_framework import status

from accounts.infrastructure.models import Account
from wallet.infrastructure.models import WalletTransaction as TransactionModel

NO_COOLDOWN = {
    **settings.WALLET_LIMITS,
    "RELOAD_COOLDOWN_SECONDS": 0,
    "PAYMENT_COOLDOWN_SECONDS": 0,
}


@pytest.fixture
def player(make_user, clear_cache):
    return make_user("player")


@pytest.fixture
def rich_player(make_user, clear_cache):
    return make_user("rich", balance=Decimal("100.00"), is_limited=False)


@pytest.mark.django_db
@pytest.mark.integration
class TestReloadAPI:
    """Integration tests for wallet reloads."""

    def test_reload_unlocks_account(self, api_client, player):
        api_client.force_authenticate(player)

        response = api_client.post(
            reverse("wallet:reload"), {"amount": "10.00", "idempotency_key": "r-1"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["new_balance"] == "10.00"
        assert data["account_unlocked"] is True
        account = Account.objects.get(user=player)
        assert account.balance == Decimal("10.00")
        assert account.is_limited is False

    def test_small_reload_keeps_limit(self, api_client, player):
        api_client.force_authenticate(player)

        response = api_client.post(reverse("wallet:reload"), {"amount": "2.00"}, format="json")

        assert response.json()["account_unlocked"] is False
        status_data = api_client.get(reverse("wallet:account-status")).json()
        assert status_data["is_limited"] is True
        assert status_data["remaining"] == "3.00"
        assert "purchase" in status_data["restricted_operations"]

    @pytest.mark.parametrize("amount", ["0.50", "500.01", "10.001", "abc"])
    def test_invalid_amount(self, api_client, player, amount):
        api_client.force_authenticate(player)
        response = api_client.post(reverse("wallet:reload"), {"amount": amount}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cooldown(self, api_client, player):
        api_client.force_authenticate(player)
        api_client.post(reverse("wallet:reload"), {"amount": "10.00"}, format="json")

        response = api_client.post(reverse("wallet:reload"), {"amount": "10.00"}, format="json")

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json()["error"]["code"] == "OPERATION_IN_PROGRESS"

    @override_settings(WALLET_LIMITS=NO_COOLDOWN)
    def test_daily_limit(self, api_client, player):
        api_client.force_authenticate(player)
        for key in ("a", "b"):
            response = api_client.post(
                reverse("wallet:reload"),
                {"amount": "500.00", "idempotency_key": key},
                format="json",
            )
            assert response.status_code == status.HTTP_200_OK

        response = api_client.post(
            reverse("wallet:reload"), {"amount": "1.00", "idempotency_key": "c"}, format="json"
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"]["code"] == "DAILY_LIMIT_EXCEEDED"
        total = api_client.get(reverse("wallet:daily-reload-total")).json()
        assert total["total"] == "1000.00"
        assert total["remaining"] == "0.00"

    @override_settings(WALLET_LIMITS=NO_COOLDOWN)
    def test_repeated_key(self, api_client, player):
        api_client.force_authenticate(player)
        body = {"amount": "10.00", "idempotency_key": "same"}
        api_client.post(reverse("wallet:reload"), body, format="json")

        response = api_client.post(reverse("wallet:reload"), body, format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Account.objects.get(user=player).balance == Decimal("10.00")


@pytest.mark.django_db
@pytest.mark.integration
class TestPaymentAPI:
    """Integration tests for wallet payments."""

    def test_payment(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)

        response = api_client.post(
            reverse("wallet:pay"),
            {
                "amount": "19.99",
                "description": "Space Miners",
                "idempotency_key": "order-1",
                "reference_type": "product",
                "reference_id": "42",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["new_balance"] == "80.01"
        row = TransactionModel.objects.get(idempotency_key="order-1")
        assert row.amount == Decimal("-19.99")
        assert row.reference_id == "42"

    def test_idempotency_header(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        body = {"amount": "5.00", "description": "Skin"}

        first = api_client.post(
            reverse("wallet:pay"), body, format="json", HTTP_IDEMPOTENCY_KEY="hdr-1"
        )
        second = api_client.post(
            reverse("wallet:pay"), body, format="json", HTTP_IDEMPOTENCY_KEY="hdr-1"
        )

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_409_CONFLICT
        assert Account.objects.get(user=rich_player).balance == Decimal("95.00")

    def test_missing_idempotency_key(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        response = api_client.post(
            reverse("wallet:pay"), {"amount": "5.00", "description": "Skin"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "MISSING_IDEMPOTENCY_KEY"

    def test_insufficient_funds(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)

        response = api_client.post(
            reverse("wallet:pay"),
            {"amount": "150.00", "description": "Bundle", "idempotency_key": "big"},
            format="json",
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"]["code"] == "INSUFFICIENT_FUNDS"
        assert TransactionModel.objects.get(idempotency_key="big").status == "failed"

    def test_missing_description(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        response = api_client.post(
            reverse("wallet:pay"),
            {"amount": "5.00", "description": "  ", "idempotency_key": "x"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
@pytest.mark.integration
class TestWalletQueriesAPI:
    """Integration tests for balance and history."""

    def test_balance(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        data = api_client.get(reverse("wallet:balance")).json()
        assert data["balance"] == "100.00"
        assert data["is_limited"] is False

    def test_history(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        api_client.post(
            reverse("wallet:pay"),
            {"amount": "1.00", "description": "Sticker", "idempotency_key": "h-1"},
            format="json",
        )

        data = api_client.get(reverse("wallet:transactions"), {"limit": 10}).json()

        assert len(data["transactions"]) == 1
        assert data["transactions"][0]["type"] == "purchase"
        assert data["transactions"][0]["balance_after"] == "99.00"
        assert data["pagination"] == {"limit": 10, "offset": 0, "has_more": False}

    def test_history_rejects_bad_limit(self, api_client, rich_player):
        api_client.force_authenticate(rich_player)
        response = api_client.get(reverse("wallet:transactions"), {"limit": 0})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_user_without_account(self, api_client, db):
        from django.contrib.auth import get_user_model

        user = get_user_model().objects.create_user(username="orphan", password="secret")
        api_client.force_authenticate(user)

        response = api_client.get(reverse("wallet:balance"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
