"""
Product model.
"""
import uuid

from django.db import models


class Product(models.Model):
    """
    Represents an application published by a developer account.
    License keys are issued against products.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_account = models.ForeignKey(
        "accounts.Account", on_delete=models.CASCADE, related_name="products"
    )
    name = models.CharField(max_length=255, help_text="Product display name")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["owner_account"]),
        ]

    def clean(self):
        """Validate product fields."""
        from django.core.exceptions import ValidationError

        if not self.owner_account_id:
            raise ValidationError("Owner account is required")
        if not self.name:
            raise ValidationError("Name is required")

    def __str__(self):
        return self.name
