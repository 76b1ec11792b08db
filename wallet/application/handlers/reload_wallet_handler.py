"""
ReloadWalletHandler.

Handles the reload wallet command.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from core.domain.events import utcnow
from core.domain.exceptions import (
    DailyLimitExceededError,
    DomainException,
    OperationInProgressError,
)
from core.domain.value_objects import TransactionType
from core.infrastructure.events import event_bus
from core.metrics import wallet_operations_total
from wallet.application.commands.reload_wallet import ReloadWalletCommand
from wallet.application.dto.wallet_dto import ReloadResultDTO
from wallet.application.handlers.get_daily_reload_total_handler import local_day_start
from wallet.application.handlers.idempotency import reject_existing
from wallet.application.services.ledger_service import LedgerService
from wallet.domain.events import WalletReloaded
from wallet.domain.limits import WalletLimits
from wallet.domain.transaction import BalanceMutation
from wallet.ports.account_unlock_hook import AccountUnlockHook, UnlockResult
from wallet.ports.operation_lock_store import OperationLockStore
from wallet.ports.transaction_repository import IdempotencyKeyTaken, TransactionRepository

logger = logging.getLogger(__name__)

RELOAD_DESCRIPTION = "Recarga de billetera"


class ReloadWalletHandler:
    """Handler for ReloadWalletCommand."""

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        ledger_service: LedgerService,
        lock_store: OperationLockStore,
        unlock_hook: Optional[AccountUnlockHook] = None,
        limits: Optional[WalletLimits] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize handler with its collaborators."""
        self.transaction_repository = transaction_repository
        self.ledger_service = ledger_service
        self.lock_store = lock_store
        self.unlock_hook = unlock_hook
        self.limits = limits or WalletLimits()
        self.clock = clock

    async def handle(self, command: ReloadWalletCommand) -> ReloadResultDTO:
        """
        Handle reload wallet command.

        Args:
            command: ReloadWalletCommand

        Returns:
            ReloadResultDTO with the new balance and unlock outcome

        Raises:
            InvalidAmountError: If the amount is out of range or has sub-cent precision
            AlreadyProcessedError: If the key already completed
            OperationInProgressError: If the key is pending or a reload just ran
            DailyLimitExceededError: If the reload would pass the daily cap
            BalanceLimitExceededError: If the balance would pass the maximum
        """
        try:
            result = await self._reload(command)
        except DomainException as exc:
            wallet_operations_total.labels(operation="reload", outcome=exc.kind.value).inc()
            raise
        wallet_operations_total.labels(operation="reload", outcome="success").inc()
        return result

    async def _reload(self, command: ReloadWalletCommand) -> ReloadResultDTO:
        amount = self.limits.validate_reload_amount(command.amount)
        now = self.clock()
        key = (command.idempotency_key or "").strip()
        if not key:
            key = f"auto_{command.account_id}_{int(now.timestamp() * 1000)}"

        existing = await self.transaction_repository.find_by_idempotency_key(
            command.account_id, key
        )
        reject_existing(existing, now, self.limits.pending_window)

        if not await self.lock_store.acquire(
            f"reload:{command.account_id}", self.limits.RELOAD_COOLDOWN_SECONDS
        ):
            raise OperationInProgressError()

        daily_total = await self.transaction_repository.sum_completed(
            command.account_id, TransactionType.RELOAD, since=local_day_start(now)
        )
        if daily_total + amount > self.limits.MAX_DAILY_RELOAD:
            raise DailyLimitExceededError(max(self.limits.MAX_DAILY_RELOAD - daily_total, 0))

        mutation = BalanceMutation(
            account_id=command.account_id,
            type=TransactionType.RELOAD,
            amount=amount,
            idempotency_key=key,
            description=RELOAD_DESCRIPTION,
            max_balance=self.limits.MAX_BALANCE,
        )
        try:
            entry = await self.ledger_service.apply(mutation)
        except IdempotencyKeyTaken as exc:
            reject_existing(exc.existing, self.clock(), self.limits.pending_window)
            raise OperationInProgressError() from exc

        await event_bus.publish(
            WalletReloaded(
                transaction_id=entry.transaction.id,
                account_id=command.account_id,
                amount=amount,
                new_balance=entry.new_balance,
            )
        )
        logger.info(
            "Wallet reloaded",
            extra={
                "account_id": str(command.account_id),
                "transaction_id": str(entry.transaction.id),
            },
        )

        unlock = await self._maybe_unlock(command)
        just_unlocked = bool(unlock and unlock.just_unlocked)
        return ReloadResultDTO(
            transaction_id=entry.transaction.id,
            new_balance=entry.new_balance,
            account_unlocked=just_unlocked,
            unlock_message=unlock.message if just_unlocked else None,
        )

    async def _maybe_unlock(self, command: ReloadWalletCommand) -> Optional[UnlockResult]:
        """The reload is already committed; an unlock failure must not undo its result."""
        if self.unlock_hook is None:
            return None
        try:
            return await self.unlock_hook.maybe_unlock(command.account_id)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Account unlock check failed",
                extra={"account_id": str(command.account_id)},
                exc_info=True,
            )
            return None
