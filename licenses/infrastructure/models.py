"""
LicenseKey model.
"""
import uuid

from django.db import models
from django.utils import timezone


class LicenseKey(models.Model):
    """
    A license key issued for a product.

    Only the encrypted key is stored. Rows are never deleted; every row
    counts against the product's lifetime quota.
    """

    STATE_CHOICES = [
        ("active", "Active"),
        ("redeemed", "Redeemed"),
        ("deactivated", "Deactivated"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        "products.Product", on_delete=models.CASCADE, related_name="license_keys"
    )
    owner_account = models.ForeignKey(
        "accounts.Account", on_delete=models.CASCADE, related_name="issued_license_keys"
    )
    ciphertext = models.TextField(help_text="Encrypted key blob (v1:nonce:ciphertext:tag)")
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default="active")
    issued_at = models.DateTimeField(default=timezone.now)
    deactivated_at = models.DateTimeField(null=True, blank=True)
    deactivation_reason = models.TextField(null=True, blank=True)
    redeemed_by_account = models.ForeignKey(
        "accounts.Account",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="redeemed_license_keys",
    )
    redeemed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "license_keys"
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["product", "state"]),
            models.Index(fields=["owner_account"]),
        ]

    def __str__(self):
        return f"{self.product_id} - {self.state}"
