"""
DeactivateLicenseKeyHandler.

Handles the deactivate license key command.
"""

import logging

from core.domain.exceptions import LicenseKeyNotFoundError, NotAuthorizedError
from core.domain.value_objects import LicenseKeyState
from core.infrastructure.events import event_bus
from core.metrics import license_keys_deactivated_total
from licenses.application.commands.deactivate_license_key import DeactivateLicenseKeyCommand
from licenses.application.dto.license_key_dto import DeactivatedLicenseKeyDTO
from licenses.domain.events import LicenseKeyDeactivated
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class DeactivateLicenseKeyHandler:
    """Handler for DeactivateLicenseKeyCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository

    async def handle(self, command: DeactivateLicenseKeyCommand) -> DeactivatedLicenseKeyDTO:
        """
        Handle deactivate license key command.

        Args:
            command: DeactivateLicenseKeyCommand

        Returns:
            DeactivatedLicenseKeyDTO

        Raises:
            LicenseKeyNotFoundError: If the key does not exist
            NotAuthorizedError: If the caller does not own the key's product
            InvalidStateError: If the key is already deactivated or redeemed
        """
        license_key = await self.license_key_repository.find_by_id(command.license_key_id)
        if license_key is None:
            raise LicenseKeyNotFoundError()

        # Ownership follows the product, not the issuing account.
        product = await self.product_repository.find_by_id(license_key.product_id)
        if product is None or not product.is_owned_by(command.account_id):
            raise NotAuthorizedError("No tienes permisos para desactivar esta llave")

        deactivated = license_key.deactivate(command.reason or "")
        saved = await self.license_key_repository.save(
            deactivated, expected_state=LicenseKeyState.ACTIVE
        )

        await event_bus.publish(
            LicenseKeyDeactivated(
                license_key_id=saved.id,
                product_id=saved.product_id,
                reason=saved.deactivation_reason,
            )
        )
        license_keys_deactivated_total.inc()
        logger.info("License key deactivated", extra={"license_key_id": str(saved.id)})

        return DeactivatedLicenseKeyDTO(
            id=saved.id,
            state=saved.state.value,
            deactivated_at=saved.deactivated_at,
            deactivation_reason=saved.deactivation_reason,
        )
