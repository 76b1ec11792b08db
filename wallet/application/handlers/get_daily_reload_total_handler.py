"""
GetDailyReloadTotalHandler.

Handles the daily reload total query.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from django.utils import timezone

from core.domain.events import utcnow
from core.domain.value_objects import TransactionType
from wallet.application.queries.get_daily_reload_total import GetDailyReloadTotalQuery
from wallet.ports.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


def local_day_start(now: datetime) -> datetime:
    """Midnight of ``now``'s day in the configured time zone."""
    return timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)


class GetDailyReloadTotalHandler:
    """
    Handler for GetDailyReloadTotalQuery.

    For display only: a storage failure reads as zero. The reload
    handler re-derives the total itself and lets failures propagate.
    """

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize handler with repositories."""
        self.transaction_repository = transaction_repository
        self.clock = clock

    async def handle(self, query: GetDailyReloadTotalQuery) -> Decimal:
        """
        Handle daily reload total query.

        Args:
            query: GetDailyReloadTotalQuery

        Returns:
            Sum of completed reloads since local midnight
        """
        try:
            return await self.transaction_repository.sum_completed(
                query.account_id,
                TransactionType.RELOAD,
                since=local_day_start(self.clock()),
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Could not compute daily reload total",
                extra={"account_id": str(query.account_id)},
                exc_info=True,
            )
            return Decimal("0.00")
