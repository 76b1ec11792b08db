"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.exceptions import InvalidStateError, ProductNotFoundError, QuotaExceededError
from core.domain.value_objects import LicenseKeyState
from core.infrastructure.database import storage_errors
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.models import (
    LicenseKey as LicenseKeyModel,
)
from licenses.ports.license_key_repository import LicenseKeyRepository
from products.infrastructure.models import Product as ProductModel


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """
    Django ORM implementation of LicenseKeyRepository.

    The quota check locks the product row, so concurrent issuers for
    one product are serialized.
    """

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        return LicenseKey(
            id=model.id,
            product_id=model.product_id,
            owner_account_id=model.owner_account_id,
            ciphertext=model.ciphertext,
            state=LicenseKeyState(model.state),
            issued_at=model.issued_at,
            deactivated_at=model.deactivated_at,
            deactivation_reason=model.deactivation_reason,
            redeemed_by_account_id=model.redeemed_by_account_id,
            redeemed_at=model.redeemed_at,
        )

    @sync_to_async
    @storage_errors
    def add_within_quota(self, license_key: LicenseKey, limit: int) -> LicenseKey:
        """
        Insert a new key unless its product already holds ``limit`` keys.

        Args:
            license_key: New LicenseKey entity
            limit: Lifetime key quota of the product

        Returns:
            Saved license key entity

        Raises:
            ProductNotFoundError: If the product row is gone
            QuotaExceededError: If the product is at its quota
        """
        with transaction.atomic():
            product = (
                ProductModel.objects.select_for_update().filter(id=license_key.product_id).first()
            )
            if product is None:
                raise ProductNotFoundError()
            if LicenseKeyModel.objects.filter(product_id=license_key.product_id).count() >= limit:
                raise QuotaExceededError(limit)
            model = LicenseKeyModel.objects.create(
                id=license_key.id,
                product_id=license_key.product_id,
                owner_account_id=license_key.owner_account_id,
                ciphertext=license_key.ciphertext,
                state=license_key.state.value,
                issued_at=license_key.issued_at,
            )
        return self._to_domain(model)

    @sync_to_async
    @storage_errors
    def save(
        self, license_key: LicenseKey, expected_state: Optional[LicenseKeyState] = None
    ) -> LicenseKey:
        """
        Persist state changes of an existing key.

        The ciphertext, product and owner are immutable and not written.
        With ``expected_state`` the write is a conditional UPDATE, so a
        concurrent transition that committed first is never overwritten.

        Args:
            license_key: LicenseKey entity to save
            expected_state: State the stored row must still be in

        Returns:
            Saved license key entity

        Raises:
            InvalidStateError: If the stored row left ``expected_state``
        """
        rows = LicenseKeyModel.objects.filter(id=license_key.id)
        if expected_state is not None:
            rows = rows.filter(state=expected_state.value)
        updated = rows.update(
            state=license_key.state.value,
            deactivated_at=license_key.deactivated_at,
            deactivation_reason=license_key.deactivation_reason,
            redeemed_by_account_id=license_key.redeemed_by_account_id,
            redeemed_at=license_key.redeemed_at,
        )
        if not updated and expected_state is not None:
            raise InvalidStateError()
        return self._to_domain(LicenseKeyModel.objects.get(id=license_key.id))

    @sync_to_async
    @storage_errors
    def find_by_id(
        self, license_key_id: uuid.UUID
    ) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        try:
            model = LicenseKeyModel.objects.get(id=license_key_id)
            return self._to_domain(model)
        except LicenseKeyModel.DoesNotExist:
            return None

    @sync_to_async
    @storage_errors
    def find_by_product(self, product_id: uuid.UUID) -> List[LicenseKey]:
        models = LicenseKeyModel.objects.filter(product_id=product_id).order_by("-issued_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    @storage_errors
    def count_by_product(self, product_id: uuid.UUID) -> int:
        return LicenseKeyModel.objects.filter(product_id=product_id).count()

    @sync_to_async
    @storage_errors
    def find_by_owner(self, owner_account_id: uuid.UUID) -> List[LicenseKey]:
        models = LicenseKeyModel.objects.filter(owner_account_id=owner_account_id)
        return [self._to_domain(model) for model in models]
