"""
Idempotency checks shared by the wallet command handlers.
"""

from datetime import datetime, timedelta
from typing import Optional

from core.domain.exceptions import AlreadyProcessedError, OperationInProgressError
from wallet.domain.transaction import WalletTransaction


def reject_existing(
    existing: Optional[WalletTransaction],
    now: datetime,
    pending_window: timedelta,
    completed_message: Optional[str] = None,
    pending_message: Optional[str] = None,
) -> None:
    """
    Stop a request whose idempotency key is already in use.

    Completed keys raise ``AlreadyProcessedError``; pending keys inside
    the window raise ``OperationInProgressError``. Failed and abandoned
    attempts pass so the retry can reclaim them.
    """
    if existing is None:
        return
    if existing.is_completed:
        if completed_message:
            raise AlreadyProcessedError(completed_message)
        raise AlreadyProcessedError()
    if existing.is_fresh_pending(now, pending_window):
        if pending_message:
            raise OperationInProgressError(pending_message)
        raise OperationInProgressError()
