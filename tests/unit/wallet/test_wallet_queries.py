"""
Unit tests for the wallet query handlers.
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from core.domain.exceptions import AccountNotFoundError, InvalidArgumentError
from core.domain.value_objects import TransactionType
from wallet.application.handlers.get_balance_handler import GetBalanceHandler
from wallet.application.handlers.get_daily_reload_total_handler import (
    GetDailyReloadTotalHandler,
)
from wallet.application.handlers.get_transaction_history_handler import (
    GetTransactionHistoryHandler,
)
from wallet.application.queries.get_balance import GetBalanceQuery
from wallet.application.queries.get_daily_reload_total import GetDailyReloadTotalQuery
from wallet.application.queries.get_transaction_history import GetTransactionHistoryQuery
from wallet.domain.transaction import WalletTransaction


class UnavailableTransactionRepository:
    async def sum_completed(self, account_id, type, since=None):  # pylint: disable=redefined-builtin
        raise ConnectionError("database is down")


async def _record(transactions, account_id, amount, at, key, type=TransactionType.RELOAD, completed=True):  # pylint: disable=redefined-builtin
    transaction = WalletTransaction.create_pending(
        account_id=account_id, type=type, amount=Decimal(amount), idempotency_key=key, now=at
    )
    if completed:
        transaction = transaction.complete(Decimal("0.00"), at)
    await transactions.save(transaction)
    return transaction


@pytest.mark.asyncio
class TestGetBalanceHandler:
    """Tests for GetBalanceHandler."""

    async def test_balance(self, funded_account, memory_accounts):
        result = await GetBalanceHandler(memory_accounts).handle(
            GetBalanceQuery(account_id=funded_account.id)
        )
        assert result.balance == Decimal("100.00")
        assert result.is_limited is False

    async def test_missing_account(self, memory_accounts):
        with pytest.raises(AccountNotFoundError):
            await GetBalanceHandler(memory_accounts).handle(GetBalanceQuery(account_id=uuid.uuid4()))


@pytest.mark.asyncio
class TestGetDailyReloadTotalHandler:
    """Tests for GetDailyReloadTotalHandler."""

    async def test_counts_today_only(self, account, memory_transactions, clock):
        await _record(memory_transactions, account.id, "100", clock() - timedelta(days=1), "old")
        await _record(memory_transactions, account.id, "40", clock() - timedelta(hours=1), "a")
        await _record(memory_transactions, account.id, "60", clock(), "b")
        await _record(memory_transactions, account.id, "30", clock(), "c", completed=False)
        await _record(
            memory_transactions, account.id, "-5", clock(), "d", type=TransactionType.PURCHASE
        )

        handler = GetDailyReloadTotalHandler(memory_transactions, clock=clock)
        total = await handler.handle(GetDailyReloadTotalQuery(account_id=account.id))
        assert total == Decimal("100")

    async def test_storage_failure_reads_as_zero(self, clock):
        handler = GetDailyReloadTotalHandler(UnavailableTransactionRepository(), clock=clock)
        total = await handler.handle(GetDailyReloadTotalQuery(account_id=uuid.uuid4()))
        assert total == Decimal("0.00")


@pytest.mark.asyncio
class TestGetTransactionHistoryHandler:
    """Tests for GetTransactionHistoryHandler."""

    async def test_completed_newest_first(self, account, memory_transactions, clock):
        first = await _record(memory_transactions, account.id, "10", clock() - timedelta(hours=2), "a")
        second = await _record(memory_transactions, account.id, "20", clock() - timedelta(hours=1), "b")
        await _record(memory_transactions, account.id, "30", clock(), "c", completed=False)

        handler = GetTransactionHistoryHandler(memory_transactions)
        items = await handler.handle(GetTransactionHistoryQuery(account_id=account.id))

        assert [item.id for item in items] == [second.id, first.id]
        assert items[0].type == "reload"
        assert items[0].status == "completed"

    async def test_pagination(self, account, memory_transactions, clock):
        for index in range(5):
            await _record(
                memory_transactions, account.id, "1", clock() - timedelta(minutes=index), f"k{index}"
            )
        handler = GetTransactionHistoryHandler(memory_transactions)
        page = await handler.handle(
            GetTransactionHistoryQuery(account_id=account.id, limit=2, offset=4)
        )
        assert len(page) == 1

    @pytest.mark.parametrize("limit,offset", [(0, 0), (101, 0), (10, -1)])
    async def test_bounds(self, memory_transactions, limit, offset):
        handler = GetTransactionHistoryHandler(memory_transactions)
        with pytest.raises(InvalidArgumentError):
            await handler.handle(
                GetTransactionHistoryQuery(account_id=uuid.uuid4(), limit=limit, offset=offset)
            )
