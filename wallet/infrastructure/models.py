"""
WalletTransaction model.
"""
import uuid

from django.db import models


class WalletTransaction(models.Model):
    """
    A balance change, or an attempt at one.

    Amounts are signed: purchases are negative, reloads positive.
    """

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("failed", "Failed"),
    ]

    TYPE_CHOICES = [
        ("reload", "Reload"),
        ("purchase", "Purchase"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        "accounts.Account", on_delete=models.CASCADE, related_name="wallet_transactions"
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    idempotency_key = models.CharField(max_length=255)
    description = models.CharField(max_length=500, blank=True, default="")
    reference_type = models.CharField(max_length=50, null=True, blank=True)
    reference_id = models.CharField(max_length=255, null=True, blank=True)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "wallet_transactions"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["account", "idempotency_key"],
                name="wallet_tx_account_idempotency_key_uniq",
            ),
        ]
        indexes = [
            models.Index(fields=["account", "type", "status", "created_at"]),
            models.Index(fields=["status", "updated_at"]),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} ({self.status})"
