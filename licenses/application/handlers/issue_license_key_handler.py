"""
IssueLicenseKeyHandler.

Handles the issue license key command.
"""

import logging

from core.domain.exceptions import NotAuthorizedError, QuotaExceededError
from core.infrastructure.encryption import EncryptionProvider
from core.infrastructure.events import event_bus
from core.metrics import license_keys_issued_total
from licenses.application.commands.issue_license_key import IssueLicenseKeyCommand
from licenses.application.dto.license_key_dto import IssuedLicenseKeyDTO
from licenses.domain import key_codec
from licenses.domain.events import LicenseKeyIssued
from licenses.domain.license_key import MAX_KEYS_PER_PRODUCT, LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class IssueLicenseKeyHandler:
    """Handler for IssueLicenseKeyCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
        encryption: EncryptionProvider,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository
        self.encryption = encryption

    async def handle(self, command: IssueLicenseKeyCommand) -> IssuedLicenseKeyDTO:
        """
        Handle issue license key command.

        Args:
            command: IssueLicenseKeyCommand

        Returns:
            IssuedLicenseKeyDTO carrying the plaintext key, shown only here

        Raises:
            NotAuthorizedError: If the product is missing or owned by someone else
            QuotaExceededError: If the product already holds its lifetime quota
        """
        product = await self.product_repository.find_by_id(command.product_id)
        if product is None or not product.is_owned_by(command.account_id):
            raise NotAuthorizedError("No tienes permisos para generar llaves de esta aplicación")

        # Early exit before spending entropy and a cipher call. The
        # repository re-checks under a row lock when inserting.
        count = await self.license_key_repository.count_by_product(product.id)
        if count >= MAX_KEYS_PER_PRODUCT:
            raise QuotaExceededError(MAX_KEYS_PER_PRODUCT)

        plaintext = key_codec.generate_key(product.id)
        ciphertext = await self.encryption.encrypt(plaintext)

        license_key = await self.license_key_repository.add_within_quota(
            LicenseKey.create(
                product_id=product.id,
                owner_account_id=command.account_id,
                ciphertext=ciphertext,
            ),
            MAX_KEYS_PER_PRODUCT,
        )

        await event_bus.publish(
            LicenseKeyIssued(
                license_key_id=license_key.id,
                product_id=product.id,
                owner_account_id=command.account_id,
            )
        )
        license_keys_issued_total.inc()
        logger.info(
            "License key issued",
            extra={"license_key_id": str(license_key.id), "product_id": str(product.id)},
        )

        return IssuedLicenseKeyDTO(
            id=license_key.id,
            product_id=product.id,
            product_name=product.name,
            key=plaintext,
            state=license_key.state.value,
            issued_at=license_key.issued_at,
            available_slots=MAX_KEYS_PER_PRODUCT - (count + 1),
        )
