"""
Ledger service.

Applies a balance mutation exactly once per idempotency key. The atomic
ledger is preferred; when it is unavailable the service falls back to a
read, claim, check, compare-and-set sequence.

The fallback is weaker: the compare-and-set only detects a concurrent
change after the fact (``ConcurrentModificationError``), and it holds no
lock between the read and the write.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from accounts.ports.account_repository import AccountRepository
from core.domain.events import utcnow
from core.domain.exceptions import (
    AccountNotFoundError,
    BalanceLimitExceededError,
    ConcurrentModificationError,
    InsufficientFundsError,
)
from core.metrics import wallet_ledger_fallback_total
from wallet.domain.limits import WalletLimits
from wallet.domain.transaction import BalanceMutation, LedgerEntry
from wallet.ports.balance_ledger import AtomicMutationUnavailable, BalanceLedger
from wallet.ports.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


class LedgerService:
    """Single entry point for balance mutations."""

    def __init__(
        self,
        account_repository: AccountRepository,
        transaction_repository: TransactionRepository,
        balance_ledger: Optional[BalanceLedger] = None,
        limits: Optional[WalletLimits] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the service.

        Args:
            account_repository: Account persistence
            transaction_repository: Transaction persistence
            balance_ledger: Atomic primitive; None means always use the fallback
            limits: Wallet limits (pending window)
            clock: Returns the current aware datetime
        """
        self.account_repository = account_repository
        self.transaction_repository = transaction_repository
        self.balance_ledger = balance_ledger
        self.limits = limits or WalletLimits()
        self.clock = clock

    async def apply(self, mutation: BalanceMutation) -> LedgerEntry:
        """
        Apply a mutation.

        Args:
            mutation: What to apply

        Returns:
            LedgerEntry with the completed transaction and new balance

        Raises:
            IdempotencyKeyTaken: If the key is held by a live transaction
            InsufficientFundsError: If a debit exceeds the balance
            BalanceLimitExceededError: If a credit exceeds the maximum balance
            ConcurrentModificationError: If the fallback lost a race
            AccountNotFoundError: If the account does not exist
        """
        now = self.clock()
        stale_before = now - self.limits.pending_window

        if self.balance_ledger is not None:
            try:
                return await self.balance_ledger.apply_atomic(mutation, now, stale_before)
            except AtomicMutationUnavailable as exc:
                logger.warning(
                    "Atomic ledger unavailable, using read-modify-write fallback: %s",
                    exc,
                    extra={"account_id": str(mutation.account_id), "operation": mutation.type.value},
                )

        wallet_ledger_fallback_total.labels(operation=mutation.type.value).inc()
        return await self._apply_fallback(mutation, now, stale_before)

    async def _apply_fallback(
        self, mutation: BalanceMutation, now: datetime, stale_before: datetime
    ) -> LedgerEntry:
        account = await self.account_repository.find_by_id(mutation.account_id)
        if account is None:
            raise AccountNotFoundError()
        current = account.balance

        pending = await self.transaction_repository.claim(
            mutation.pending_transaction(now), stale_before
        )

        new_balance = current + mutation.signed_amount
        failure = None
        if mutation.is_debit and new_balance < 0:
            failure = InsufficientFundsError(current, mutation.amount)
        elif mutation.max_balance is not None and new_balance > mutation.max_balance:
            failure = BalanceLimitExceededError(mutation.max_balance, current)
        elif not await self.account_repository.compare_and_set_balance(
            mutation.account_id, current, new_balance
        ):
            failure = ConcurrentModificationError()

        if failure is not None:
            await self.transaction_repository.save(pending.fail(self.clock()))
            raise failure

        completed = await self.transaction_repository.save(
            pending.complete(new_balance, self.clock())
        )
        return LedgerEntry(transaction=completed, new_balance=new_balance)
