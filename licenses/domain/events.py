"""
License key domain events.

Domain events represent something that happened in the key issuance domain.
Plaintext keys and ciphertexts never travel in events.
"""

import uuid
from typing import Any, Dict

from core.domain.events import DomainEvent


class LicenseKeyIssued(DomainEvent):
    """Event raised when a license key is issued."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        product_id: uuid.UUID,
        owner_account_id: uuid.UUID,
    ):
        """
        Initialize LicenseKeyIssued event.

        Args:
            license_key_id: License key UUID
            product_id: Product UUID
            owner_account_id: Issuing account UUID
        """
        super().__init__(**self.envelope(license_key_id))
        self.license_key_id = license_key_id
        self.product_id = product_id
        self.owner_account_id = owner_account_id

    def payload(self) -> Dict[str, Any]:
        return {
            "license_key_id": str(self.license_key_id),
            "product_id": str(self.product_id),
            "owner_account_id": str(self.owner_account_id),
        }


class LicenseKeyDeactivated(DomainEvent):
    """Event raised when an owner deactivates a license key."""

    def __init__(self, license_key_id: uuid.UUID, product_id: uuid.UUID, reason: str):
        """
        Initialize LicenseKeyDeactivated event.

        Args:
            license_key_id: License key UUID
            product_id: Product UUID
            reason: Recorded deactivation reason
        """
        super().__init__(**self.envelope(license_key_id))
        self.license_key_id = license_key_id
        self.product_id = product_id
        self.reason = reason

    def payload(self) -> Dict[str, Any]:
        return {
            "license_key_id": str(self.license_key_id),
            "product_id": str(self.product_id),
            "reason": self.reason,
        }
