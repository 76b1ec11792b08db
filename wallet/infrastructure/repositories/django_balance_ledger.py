"""
Django implementation of the BalanceLedger port.

The balance moves with a single conditional UPDATE inside the same
database transaction that claims the idempotency key, so a key is
applied at most once and a debit can never overdraw the account.
"""

import logging
from datetime import datetime
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.db import transaction as db_transaction
from django.db.models import F

from accounts.infrastructure.models import Account as AccountModel
from core.domain.exceptions import (
    AccountNotFoundError,
    BalanceLimitExceededError,
    InsufficientFundsError,
)
from core.domain.value_objects import TransactionStatus
from core.infrastructure.database import storage_errors
from wallet.domain.transaction import BalanceMutation, LedgerEntry
from wallet.infrastructure.repositories.django_transaction_repository import claim_row, to_domain
from wallet.ports.balance_ledger import AtomicMutationUnavailable, BalanceLedger

logger = logging.getLogger(__name__)


class DjangoBalanceLedger(BalanceLedger):
    """
    Atomic ledger over the ORM.

    Disabled through ``WALLET_ATOMIC_MUTATIONS = False``, in which case
    callers fall back to the read-modify-write path.
    """

    def __init__(self, enabled: Optional[bool] = None):
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        if self._enabled is not None:
            return self._enabled
        return getattr(settings, "WALLET_ATOMIC_MUTATIONS", True)

    async def apply_atomic(
        self, mutation: BalanceMutation, now: datetime, stale_before: datetime
    ) -> LedgerEntry:
        if not self.enabled:
            raise AtomicMutationUnavailable("atomic balance mutations are disabled")
        return await self._apply(mutation, now, stale_before)

    @sync_to_async
    @storage_errors
    def _apply(
        self, mutation: BalanceMutation, now: datetime, stale_before: datetime
    ) -> LedgerEntry:
        failure = None
        new_balance = None

        with db_transaction.atomic():
            current = (
                AccountModel.objects.select_for_update()
                .filter(id=mutation.account_id)
                .values_list("balance", flat=True)
                .first()
            )
            if current is None:
                raise AccountNotFoundError()

            row = claim_row(mutation.pending_transaction(now), stale_before)

            accounts = AccountModel.objects.filter(id=mutation.account_id)
            if mutation.is_debit:
                updated = accounts.filter(balance__gte=mutation.amount).update(
                    balance=F("balance") - mutation.amount, updated_at=now
                )
            else:
                if mutation.max_balance is not None:
                    accounts = accounts.filter(balance__lte=mutation.max_balance - mutation.amount)
                updated = accounts.update(balance=F("balance") + mutation.amount, updated_at=now)

            if updated:
                new_balance = AccountModel.objects.values_list("balance", flat=True).get(
                    id=mutation.account_id
                )
                row.status = TransactionStatus.COMPLETED.value
                row.balance_after = new_balance
            else:
                row.status = TransactionStatus.FAILED.value
                if mutation.is_debit:
                    failure = InsufficientFundsError(current, mutation.amount)
                else:
                    failure = BalanceLimitExceededError(mutation.max_balance, current)
            row.updated_at = now
            row.save(update_fields=["status", "balance_after", "updated_at"])

        # Raised after commit so the failed attempt stays recorded.
        if failure is not None:
            logger.info(
                "Balance mutation rejected",
                extra={
                    "account_id": str(mutation.account_id),
                    "transaction_id": str(row.id),
                    "reason": failure.code,
                },
            )
            raise failure

        return LedgerEntry(transaction=to_domain(row), new_balance=new_balance)
