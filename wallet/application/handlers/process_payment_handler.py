"""
ProcessPaymentHandler.

Handles the process payment command.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from core.domain.events import utcnow
from core.domain.exceptions import (
    DomainException,
    MissingIdempotencyKeyError,
    OperationInProgressError,
)
from core.domain.value_objects import TransactionType
from core.infrastructure.events import event_bus
from core.metrics import wallet_operations_total
from wallet.application.commands.process_payment import ProcessPaymentCommand
from wallet.application.dto.wallet_dto import PaymentResultDTO
from wallet.application.handlers.idempotency import reject_existing
from wallet.application.services.ledger_service import LedgerService
from wallet.domain.events import PaymentProcessed
from wallet.domain.limits import WalletLimits
from wallet.domain.transaction import BalanceMutation
from wallet.ports.operation_lock_store import OperationLockStore
from wallet.ports.transaction_repository import IdempotencyKeyTaken, TransactionRepository

logger = logging.getLogger(__name__)

ALREADY_PAID_MESSAGE = "Este pago ya fue procesado anteriormente"
PAYMENT_PENDING_MESSAGE = "Este pago está siendo procesado"
DOUBLE_CLICK_MESSAGE = "Pago en proceso. No realices múltiples clicks."


class ProcessPaymentHandler:
    """Handler for ProcessPaymentCommand."""

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        ledger_service: LedgerService,
        lock_store: OperationLockStore,
        limits: Optional[WalletLimits] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize handler with its collaborators."""
        self.transaction_repository = transaction_repository
        self.ledger_service = ledger_service
        self.lock_store = lock_store
        self.limits = limits or WalletLimits()
        self.clock = clock

    async def handle(self, command: ProcessPaymentCommand) -> PaymentResultDTO:
        """
        Handle process payment command.

        Args:
            command: ProcessPaymentCommand

        Returns:
            PaymentResultDTO with the new balance

        Raises:
            MissingIdempotencyKeyError: If no idempotency key was sent
            InvalidAmountError: If the amount is not a valid purchase amount
            AlreadyProcessedError: If the key already completed
            OperationInProgressError: If the key is pending or was just submitted
            InsufficientFundsError: If the balance does not cover the amount
        """
        try:
            result = await self._process(command)
        except DomainException as exc:
            wallet_operations_total.labels(operation="payment", outcome=exc.kind.value).inc()
            raise
        wallet_operations_total.labels(operation="payment", outcome="success").inc()
        return result

    async def _process(self, command: ProcessPaymentCommand) -> PaymentResultDTO:
        key = (command.idempotency_key or "").strip()
        if not key:
            raise MissingIdempotencyKeyError()
        amount = self.limits.validate_purchase_amount(command.amount)

        existing = await self.transaction_repository.find_by_idempotency_key(
            command.account_id, key
        )
        self._reject(existing)

        lock_key = f"payment:{command.account_id}:{key}"
        if not await self.lock_store.acquire(lock_key, self.limits.PAYMENT_COOLDOWN_SECONDS):
            raise OperationInProgressError(DOUBLE_CLICK_MESSAGE)

        mutation = BalanceMutation(
            account_id=command.account_id,
            type=TransactionType.PURCHASE,
            amount=amount,
            idempotency_key=key,
            description=command.description or "",
            reference_type=command.reference_type,
            reference_id=command.reference_id,
        )
        try:
            entry = await self.ledger_service.apply(mutation)
        except IdempotencyKeyTaken as exc:
            # Lost a race with a concurrent request carrying the same key.
            self._reject(exc.existing)
            raise OperationInProgressError(PAYMENT_PENDING_MESSAGE) from exc

        await event_bus.publish(
            PaymentProcessed(
                transaction_id=entry.transaction.id,
                account_id=command.account_id,
                amount=amount,
                new_balance=entry.new_balance,
                reference_type=command.reference_type,
                reference_id=command.reference_id,
            )
        )
        logger.info(
            "Payment processed",
            extra={
                "account_id": str(command.account_id),
                "transaction_id": str(entry.transaction.id),
            },
        )
        return PaymentResultDTO(transaction_id=entry.transaction.id, new_balance=entry.new_balance)

    def _reject(self, existing) -> None:
        reject_existing(
            existing,
            self.clock(),
            self.limits.pending_window,
            completed_message=ALREADY_PAID_MESSAGE,
            pending_message=PAYMENT_PENDING_MESSAGE,
        )
