"""
Django implementation of TransactionRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError
from django.db import transaction as db_transaction
from django.db.models import Sum
from django.utils import timezone

from core.domain.value_objects import TransactionStatus, TransactionType
from core.infrastructure.database import storage_errors
from wallet.domain.transaction import WalletTransaction
from wallet.infrastructure.models import WalletTransaction as TransactionModel
from wallet.ports.transaction_repository import IdempotencyKeyTaken, TransactionRepository


def to_domain(model: TransactionModel) -> WalletTransaction:
    """
    Convert Django model to domain entity.

    Args:
        model: Django WalletTransaction model

    Returns:
        WalletTransaction domain entity
    """
    return WalletTransaction(
        id=model.id,
        account_id=model.account_id,
        type=TransactionType(model.type),
        amount=model.amount,
        status=TransactionStatus(model.status),
        idempotency_key=model.idempotency_key,
        description=model.description,
        reference_type=model.reference_type,
        reference_id=model.reference_id,
        balance_after=model.balance_after,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def claim_row(pending: WalletTransaction, stale_before: datetime) -> TransactionModel:
    """
    Insert a pending row or take over a reclaimable one.

    Must run inside ``transaction.atomic``; the insert gets its own
    savepoint so a key collision does not poison the outer transaction.

    Raises:
        IdempotencyKeyTaken: If the key is held by a live transaction
    """
    values = {
        "type": pending.type.value,
        "amount": pending.amount,
        "status": TransactionStatus.PENDING.value,
        "description": pending.description,
        "reference_type": pending.reference_type,
        "reference_id": pending.reference_id,
        "balance_after": None,
        "created_at": pending.created_at,
        "updated_at": pending.updated_at,
    }
    try:
        with db_transaction.atomic():
            return TransactionModel.objects.create(
                id=pending.id,
                account_id=pending.account_id,
                idempotency_key=pending.idempotency_key,
                **values,
            )
    except IntegrityError:
        existing = (
            TransactionModel.objects.select_for_update()
            .filter(account_id=pending.account_id, idempotency_key=pending.idempotency_key)
            .first()
        )
        if existing is None:
            raise
        if not to_domain(existing).is_reclaimable(stale_before):
            raise IdempotencyKeyTaken(to_domain(existing)) from None
        for field, value in values.items():
            setattr(existing, field, value)
        existing.save(update_fields=list(values))
        return existing


class DjangoTransactionRepository(TransactionRepository):
    """Django ORM implementation of TransactionRepository."""

    @sync_to_async
    @storage_errors
    def find_by_idempotency_key(
        self, account_id: uuid.UUID, idempotency_key: str
    ) -> Optional[WalletTransaction]:
        """
        Find the transaction recorded under an idempotency key.

        Args:
            account_id: Account UUID
            idempotency_key: Caller-supplied key

        Returns:
            WalletTransaction or None if the key is unused
        """
        model = TransactionModel.objects.filter(
            account_id=account_id, idempotency_key=idempotency_key
        ).first()
        return to_domain(model) if model else None

    @sync_to_async
    @storage_errors
    def claim(self, transaction: WalletTransaction, stale_before: datetime) -> WalletTransaction:
        """Insert a pending transaction, or take over a reclaimable one."""
        with db_transaction.atomic():
            return to_domain(claim_row(transaction, stale_before))

    @sync_to_async
    @storage_errors
    def save(self, transaction: WalletTransaction) -> WalletTransaction:
        """
        Persist status changes of a transaction.

        Args:
            transaction: WalletTransaction to save

        Returns:
            Saved transaction
        """
        TransactionModel.objects.filter(id=transaction.id).update(
            status=transaction.status.value,
            balance_after=transaction.balance_after,
            updated_at=transaction.updated_at,
        )
        return to_domain(TransactionModel.objects.get(id=transaction.id))

    @sync_to_async
    @storage_errors
    def sum_completed(
        self,
        account_id: uuid.UUID,
        type: TransactionType,  # pylint: disable=redefined-builtin
        since: Optional[datetime] = None,
    ) -> Decimal:
        """Total of completed transactions of one type."""
        queryset = TransactionModel.objects.filter(
            account_id=account_id,
            type=type.value,
            status=TransactionStatus.COMPLETED.value,
        )
        if since is not None:
            queryset = queryset.filter(created_at__gte=since)
        total = queryset.aggregate(total=Sum("amount"))["total"]
        return total if total is not None else Decimal("0.00")

    @sync_to_async
    @storage_errors
    def list_completed(
        self, account_id: uuid.UUID, limit: int, offset: int
    ) -> List[WalletTransaction]:
        """Completed transactions, newest first."""
        models = TransactionModel.objects.filter(
            account_id=account_id, status=TransactionStatus.COMPLETED.value
        ).order_by("-created_at")[offset:offset + limit]
        return [to_domain(model) for model in models]

    @sync_to_async
    @storage_errors
    def fail_stale_pending(self, before: datetime) -> int:
        """Mark abandoned pending transactions as failed."""
        return TransactionModel.objects.filter(
            status=TransactionStatus.PENDING.value, updated_at__lt=before
        ).update(status=TransactionStatus.FAILED.value, updated_at=timezone.now())
