"""
Celery tasks for wallet housekeeping.
"""
import logging

from asgiref.sync import async_to_sync
from django.conf import settings

from core.domain.events import utcnow
from StorefrontCoreService.celery import app
from wallet.domain.limits import WalletLimits
from wallet.infrastructure.repositories.django_transaction_repository import (
    DjangoTransactionRepository,
)

logger = logging.getLogger(__name__)


@app.task
def fail_stale_pending_transactions() -> int:
    """
    Mark pending transactions abandoned past the pending window as failed.

    The balance was never changed for such rows; a retry with the same
    idempotency key can reclaim them either way, this only keeps the
    history accurate.

    Returns:
        Number of transactions marked failed
    """
    limits = WalletLimits.from_mapping(getattr(settings, "WALLET_LIMITS", {}))
    before = utcnow() - limits.pending_window
    count = async_to_sync(DjangoTransactionRepository().fail_stale_pending)(before)
    if count:
        logger.info("Marked stale pending transactions as failed", extra={"count": count})
    return count
