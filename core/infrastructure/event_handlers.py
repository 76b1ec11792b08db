"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseKeyDeactivated, LicenseKeyIssued
from wallet.domain.events import PaymentProcessed, WalletReloaded

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    LicenseKeyIssued,
    LicenseKeyDeactivated,
    PaymentProcessed,
    WalletReloaded,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event as one structured log record.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "payload": event.payload(),
            },
        )


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    for event_type in AUDITED_EVENTS:
        event_bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
