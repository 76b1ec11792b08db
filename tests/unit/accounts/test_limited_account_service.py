"""
Unit tests for LimitedAccountService.
"""
import uuid
from decimal import Decimal

import pytest

from accounts.application.services.limited_account_service import (
    ALREADY_UNLOCKED_MESSAGE,
    MESSAGES,
    RESTRICTED_OPERATIONS,
    LimitedAccountService,
    error_message,
)
from core.domain.value_objects import TransactionType
from wallet.domain.transaction import WalletTransaction


@pytest.fixture
def service(memory_accounts, memory_transactions):
    return LimitedAccountService(
        memory_accounts, memory_transactions, unlock_amount=Decimal("5.00")
    )


async def _reloaded(transactions, account_id, amount, key, clock):
    transaction = WalletTransaction.create_pending(
        account_id=account_id,
        type=TransactionType.RELOAD,
        amount=Decimal(amount),
        idempotency_key=key,
        now=clock(),
    ).complete(Decimal(amount), clock())
    await transactions.save(transaction)


@pytest.mark.asyncio
class TestLimitedAccountService:
    """Tests for LimitedAccountService."""

    async def test_missing_account_is_limited(self, service):
        assert await service.is_account_limited(uuid.uuid4()) is True

    async def test_not_eligible(self, service, account, memory_transactions, clock):
        await _reloaded(memory_transactions, account.id, "3.00", "r-1", clock)

        result = await service.maybe_unlock(account.id)

        assert result.success is False
        assert result.remaining == Decimal("2.00")
        assert result.message == "Necesitas recargar $2.00 más para desbloquear tu cuenta."

    async def test_unlock_once(self, service, account, memory_accounts, memory_transactions, clock):
        await _reloaded(memory_transactions, account.id, "2.00", "r-1", clock)
        await _reloaded(memory_transactions, account.id, "3.00", "r-2", clock)

        first = await service.maybe_unlock(account.id)
        second = await service.maybe_unlock(account.id)

        assert first.just_unlocked is True
        assert memory_accounts.accounts[account.id].is_limited is False
        assert second.just_unlocked is False
        assert second.already_unlocked is True
        assert second.message == ALREADY_UNLOCKED_MESSAGE

    async def test_purchases_do_not_count(self, service, account, memory_transactions, clock):
        purchase = WalletTransaction.create_pending(
            account_id=account.id,
            type=TransactionType.PURCHASE,
            amount=Decimal("-10.00"),
            idempotency_key="p-1",
            now=clock(),
        ).complete(Decimal("0.00"), clock())
        await memory_transactions.save(purchase)

        eligible, total, remaining = await service.check_unlock_eligibility(account.id)
        assert eligible is False
        assert total == Decimal("0.00")
        assert remaining == Decimal("5.00")

    async def test_status_of_limited_account(self, service, account, memory_transactions, clock):
        await _reloaded(memory_transactions, account.id, "6.00", "r-1", clock)

        status = await service.get_account_status(account.id)

        assert status.is_limited is True
        assert status.can_unlock is True
        assert status.remaining == Decimal("0.00")
        assert status.restricted_operations == RESTRICTED_OPERATIONS

    async def test_status_of_unlocked_account(self, service, funded_account):
        status = await service.get_account_status(funded_account.id)
        assert status.is_limited is False
        assert status.can_unlock is False
        assert status.restricted_operations == []


class TestErrorMessage:
    """Tests for restricted operation messages."""

    def test_known_operation(self):
        assert error_message("trade") == MESSAGES["trade"]

    def test_unknown_operation(self):
        assert error_message("gift") == MESSAGES["generic"]
