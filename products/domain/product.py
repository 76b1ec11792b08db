"""
Product domain entity.

A product is an application published by a developer account. License
keys are issued against it, and only its owner may manage them.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.events import utcnow


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents an application that license keys can be issued for.
    """

    id: uuid.UUID
    owner_account_id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Product name too long")
        if not self.owner_account_id:
            raise ValueError("Owner account ID is required")

    @classmethod
    def create(
        cls,
        owner_account_id: uuid.UUID,
        name: str,
        product_id: Optional[uuid.UUID] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            owner_account_id: Account that publishes the product
            name: Product display name
            product_id: Optional UUID (generated if not provided)

        Returns:
            Product entity instance
        """
        now = utcnow()
        return cls(
            id=product_id or uuid.uuid4(),
            owner_account_id=owner_account_id,
            name=name.strip(),
            created_at=now,
            updated_at=now,
        )

    def is_owned_by(self, account_id: uuid.UUID) -> bool:
        """Check whether an account owns this product."""
        return self.owner_account_id == account_id
