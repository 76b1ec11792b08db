"""
Django implementation of AccountRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from decimal import Decimal
from typing import Optional

from asgiref.sync import sync_to_async
from django.utils import timezone

from accounts.domain.account import LedgerAccount
from accounts.infrastructure.models import Account as AccountModel
from accounts.ports.account_repository import AccountRepository
from core.infrastructure.database import storage_errors


class DjangoAccountRepository(AccountRepository):
    """Django ORM implementation of AccountRepository."""

    def _to_domain(self, model: AccountModel) -> LedgerAccount:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Account model

        Returns:
            LedgerAccount domain entity
        """
        return LedgerAccount(
            id=model.id,
            display_name=model.display_name,
            balance=model.balance,
            is_limited=model.is_limited,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @sync_to_async
    @storage_errors
    def save(self, account: LedgerAccount) -> LedgerAccount:
        """
        Save an account entity.

        Args:
            account: LedgerAccount entity to save

        Returns:
            Saved account entity
        """
        model, _ = AccountModel.objects.update_or_create(
            id=account.id,
            defaults={
                "display_name": account.display_name,
                "balance": account.balance,
                "is_limited": account.is_limited,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    @storage_errors
    def find_by_id(self, account_id: uuid.UUID) -> Optional[LedgerAccount]:
        """
        Find an account by ID.

        Args:
            account_id: Account UUID

        Returns:
            LedgerAccount entity or None if not found
        """
        try:
            return self._to_domain(AccountModel.objects.get(id=account_id))
        except AccountModel.DoesNotExist:
            return None

    @sync_to_async
    @storage_errors
    def compare_and_set_balance(
        self, account_id: uuid.UUID, expected: Decimal, new_balance: Decimal
    ) -> bool:
        """Optimistic balance write guarded by the previously read value."""
        updated = AccountModel.objects.filter(id=account_id, balance=expected).update(
            balance=new_balance, updated_at=timezone.now()
        )
        return updated == 1

    @sync_to_async
    @storage_errors
    def set_unlocked(self, account_id: uuid.UUID) -> bool:
        """Flip ``is_limited`` from True to False."""
        updated = AccountModel.objects.filter(id=account_id, is_limited=True).update(
            is_limited=False, updated_at=timezone.now()
        )
        return updated == 1
