"""
LicenseKey repository port (interface).

This defines the contract for license key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from core.domain.value_objects import LicenseKeyState
from licenses.domain.license_key import LicenseKey


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def add_within_quota(self, license_key: LicenseKey, limit: int) -> LicenseKey:
        """
        Insert a new key unless its product already holds ``limit`` keys.

        The count and the insert must be atomic with respect to other
        inserts for the same product.

        Args:
            license_key: New LicenseKey entity
            limit: Lifetime key quota of the product

        Returns:
            Saved license key entity

        Raises:
            QuotaExceededError: If the product is at its quota
        """
        pass

    @abstractmethod
    async def save(
        self, license_key: LicenseKey, expected_state: Optional[LicenseKeyState] = None
    ) -> LicenseKey:
        """
        Persist state changes of an existing key.

        Args:
            license_key: LicenseKey entity to save
            expected_state: If given, write only while the stored key is
                still in this state

        Returns:
            Saved license key entity

        Raises:
            InvalidStateError: If the stored key is no longer in ``expected_state``
        """
        pass

    @abstractmethod
    async def find_by_id(
        self, license_key_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_product(self, product_id: uuid.UUID) -> List[LicenseKey]:
        """
        List every key of a product, newest first.

        Args:
            product_id: Product UUID

        Returns:
            List of LicenseKey entities
        """
        pass

    @abstractmethod
    async def count_by_product(self, product_id: uuid.UUID) -> int:
        """
        Count every key ever issued for a product, whatever its state.

        Args:
            product_id: Product UUID

        Returns:
            Number of keys
        """
        pass

    @abstractmethod
    async def find_by_owner(self, owner_account_id: uuid.UUID) -> List[LicenseKey]:
        """
        List every key issued by an account.

        Args:
            owner_account_id: Account UUID

        Returns:
            List of LicenseKey entities
        """
        pass
