"""
Serializers for wallet API endpoints.
"""

from rest_framework import serializers

AMOUNT_FIELD = dict(max_digits=12, decimal_places=2)


class ReloadWalletRequestSerializer(serializers.Serializer):
    """
    Serializer for reload request.

    ``amount`` is taken as text; the wallet limits parse and validate it.
    """

    amount = serializers.CharField(required=True, trim_whitespace=True)
    idempotency_key = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )


class ProcessPaymentRequestSerializer(serializers.Serializer):
    """Serializer for payment request."""

    amount = serializers.CharField(required=True, trim_whitespace=True)
    description = serializers.CharField(required=True, max_length=255)
    idempotency_key = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
    reference_type = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=50
    )
    reference_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )

    def validate_description(self, value):
        """Strip surrounding whitespace and reject empty descriptions."""
        value = value.strip()
        if not value:
            raise serializers.ValidationError("La descripción del pago es requerida")
        return value


class PaymentResultSerializer(serializers.Serializer):
    """Serializer for PaymentResultDTO."""

    transaction_id = serializers.UUIDField()
    new_balance = serializers.DecimalField(**AMOUNT_FIELD)
    message = serializers.SerializerMethodField()

    def get_message(self, _obj) -> str:
        return "Pago procesado exitosamente"


class ReloadResultSerializer(serializers.Serializer):
    """Serializer for ReloadResultDTO."""

    transaction_id = serializers.UUIDField()
    new_balance = serializers.DecimalField(**AMOUNT_FIELD)
    account_unlocked = serializers.BooleanField()
    unlock_message = serializers.CharField(allow_null=True)
    message = serializers.SerializerMethodField()

    def get_message(self, obj) -> str:
        if obj.account_unlocked:
            return "¡Recarga exitosa! Tu cuenta ha sido desbloqueada."
        return "Recarga procesada exitosamente"


class BalanceSerializer(serializers.Serializer):
    """Serializer for BalanceDTO."""

    account_id = serializers.UUIDField()
    balance = serializers.DecimalField(**AMOUNT_FIELD)
    is_limited = serializers.BooleanField()


class DailyReloadTotalSerializer(serializers.Serializer):
    """Serializer for the daily reload total."""

    total = serializers.DecimalField(**AMOUNT_FIELD)
    limit = serializers.DecimalField(**AMOUNT_FIELD)
    remaining = serializers.DecimalField(**AMOUNT_FIELD)


class TransactionSerializer(serializers.Serializer):
    """Serializer for TransactionDTO."""

    id = serializers.UUIDField()
    type = serializers.CharField()
    amount = serializers.DecimalField(**AMOUNT_FIELD)
    status = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    reference_type = serializers.CharField(allow_null=True)
    reference_id = serializers.CharField(allow_null=True)
    balance_after = serializers.DecimalField(allow_null=True, **AMOUNT_FIELD)
    created_at = serializers.DateTimeField()


class TransactionHistoryQuerySerializer(serializers.Serializer):
    """Serializer for history query parameters."""

    limit = serializers.IntegerField(required=False, default=20)
    offset = serializers.IntegerField(required=False, default=0)


class PaginationSerializer(serializers.Serializer):
    """Pagination block of the history response."""

    limit = serializers.IntegerField()
    offset = serializers.IntegerField()
    has_more = serializers.BooleanField()


class TransactionHistorySerializer(serializers.Serializer):
    """Serializer for the history response."""

    transactions = TransactionSerializer(many=True)
    pagination = PaginationSerializer()


class AccountStatusSerializer(serializers.Serializer):
    """Serializer for AccountStatusDTO."""

    is_limited = serializers.BooleanField()
    total_reloaded = serializers.DecimalField(**AMOUNT_FIELD)
    unlock_amount = serializers.DecimalField(**AMOUNT_FIELD)
    remaining = serializers.DecimalField(**AMOUNT_FIELD)
    can_unlock = serializers.BooleanField()
    restricted_operations = serializers.ListField(child=serializers.CharField())
