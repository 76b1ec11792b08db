"""
App configuration for the storefront core service.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class StorefrontCoreServiceConfig(AppConfig):
    """App configuration for StorefrontCoreService."""

    name = "StorefrontCoreService"
    verbose_name = "Storefront Core Service"

    def ready(self):
        """Subscribe domain event handlers once the app registry is loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
