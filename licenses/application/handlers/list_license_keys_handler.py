"""
ListLicenseKeysHandler.

Handles the list license keys query.
"""

from core.domain.exceptions import NotAuthorizedError
from core.infrastructure.encryption import EncryptionProvider
from licenses.application.dto.license_key_dto import (
    KeyCountsDTO,
    LicenseKeyDTO,
    LicenseKeyListDTO,
)
from licenses.application.queries.list_license_keys import ListLicenseKeysQuery
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.ports.product_repository import ProductRepository


class ListLicenseKeysHandler:
    """
    Handler for ListLicenseKeysQuery.

    Keys are decrypted for the owner on every listing.
    """

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

    async def handle(self, query: ListLicenseKeysQuery) -> LicenseKeyListDTO:
        """
        Handle list license keys query.

        Args:
            query: ListLicenseKeysQuery

        Returns:
            LicenseKeyListDTO with decrypted keys and counts

        Raises:
            NotAuthorizedError: If the product is missing or owned by someone else
            DecryptionError: If a stored ciphertext cannot be decrypted
        """
        product = await self.product_repository.find_by_id(query.product_id)
        if product is None or not product.is_owned_by(query.account_id):
            raise NotAuthorizedError("No tienes permisos para ver las llaves de esta aplicación")

        keys = await self.license_key_repository.find_by_product(product.id)
        items = []
        for key in keys:
            items.append(
                LicenseKeyDTO(
                    id=key.id,
                    key=await self.encryption.decrypt(key.ciphertext),
                    state=key.state.value,
                    status_label=key.status_label,
                    issued_at=key.issued_at,
                    deactivated_at=key.deactivated_at,
                    deactivation_reason=key.deactivation_reason,
                    redeemed_at=key.redeemed_at,
                )
            )

        return LicenseKeyListDTO(
            product_id=product.id,
            product_name=product.name,
            keys=items,
            counts=KeyCountsDTO.from_keys(keys),
        )
