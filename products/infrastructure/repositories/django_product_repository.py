"""
Django implementation of ProductRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from core.infrastructure.database import storage_errors
from products.domain.product import Product
from products.infrastructure.models import Product as ProductModel
from products.ports.product_repository import ProductRepository


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Product model

        Returns:
            Product domain entity
        """
        return Product(
            id=model.id,
            owner_account_id=model.owner_account_id,
            name=model.name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @sync_to_async
    @storage_errors
    def save(self, product: Product) -> Product:
        """
        Save a product entity.

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        model, _ = ProductModel.objects.update_or_create(
            id=product.id,
            defaults={
                "owner_account_id": product.owner_account_id,
                "name": product.name,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    @storage_errors
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        try:
            model = ProductModel.objects.get(id=product_id)
            return self._to_domain(model)
        except ProductModel.DoesNotExist:
            return None

    @sync_to_async
    @storage_errors
    def list_by_owner(self, owner_account_id: uuid.UUID) -> List[Product]:
        """
        List all products owned by an account.

        Args:
            owner_account_id: Account UUID

        Returns:
            List of Product entities
        """
        models = ProductModel.objects.filter(owner_account_id=owner_account_id)
        return [self._to_domain(model) for model in models]
