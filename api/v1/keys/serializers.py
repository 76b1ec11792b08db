"""
Serializers for license key API endpoints.

Response fields keep the Spanish names the storefront clients read.
"""

from rest_framework import serializers


class ProductRefSerializer(serializers.Serializer):
    """Reads ``product_id``/``product_name`` off the parent object."""

    id = serializers.UUIDField(source="product_id")
    nombre = serializers.CharField(source="product_name")


class IssuedLicenseKeySerializer(serializers.Serializer):
    """Serializer for IssuedLicenseKeyDTO."""

    id = serializers.UUIDField()
    aplicacion = ProductRefSerializer(source="*")
    clave = serializers.CharField(source="key")
    estado = serializers.CharField(source="state")
    fecha_generacion = serializers.DateTimeField(source="issued_at")
    mensaje = serializers.CharField(source="message")
    llaves_disponibles = serializers.IntegerField(source="available_slots")


class LicenseKeySerializer(serializers.Serializer):
    """Serializer for LicenseKeyDTO."""

    id = serializers.UUIDField()
    clave = serializers.CharField(source="key")
    estado = serializers.CharField(source="status_label")
    activa = serializers.SerializerMethodField()
    fecha_generacion = serializers.DateTimeField(source="issued_at")
    fecha_desactivacion = serializers.DateTimeField(source="deactivated_at", allow_null=True)
    motivo_desactivacion = serializers.CharField(source="deactivation_reason", allow_null=True)
    fecha_uso = serializers.DateTimeField(source="redeemed_at", allow_null=True)

    def get_activa(self, obj) -> bool:
        return obj.state == "active"


class KeyCountsSerializer(serializers.Serializer):
    """Serializer for KeyCountsDTO."""

    total = serializers.IntegerField()
    activas = serializers.IntegerField(source="active")
    canjeadas = serializers.IntegerField(source="redeemed")
    desactivadas = serializers.IntegerField(source="deactivated")
    disponibles = serializers.IntegerField(source="available")
    limite = serializers.IntegerField(source="limit")


class LicenseKeyListSerializer(serializers.Serializer):
    """Serializer for LicenseKeyListDTO."""

    aplicacion = ProductRefSerializer(source="*")
    estadisticas = KeyCountsSerializer(source="counts")
    llaves = LicenseKeySerializer(source="keys", many=True)


class DeactivateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for deactivate license key request."""

    motivo = serializers.CharField(required=False, allow_blank=True, max_length=500)


class DeactivatedLicenseKeySerializer(serializers.Serializer):
    """Serializer for DeactivatedLicenseKeyDTO."""

    success = serializers.SerializerMethodField()
    mensaje = serializers.CharField(source="message")
    llave_id = serializers.UUIDField(source="id")
    estado = serializers.CharField(source="state")
    fecha_desactivacion = serializers.DateTimeField(source="deactivated_at")
    motivo_desactivacion = serializers.CharField(source="deactivation_reason")

    def get_success(self, _obj) -> bool:
        return True


class ProductKeyStatisticsSerializer(serializers.Serializer):
    """Serializer for ProductKeyStatisticsDTO."""

    aplicacion = ProductRefSerializer(source="*")
    estadisticas = KeyCountsSerializer(source="counts")


class KeyTotalsSerializer(serializers.Serializer):
    """Serializer for the totals block of KeyStatisticsDTO."""

    total_juegos = serializers.IntegerField(source="total_products")
    total_llaves = serializers.IntegerField(source="total_keys")
    llaves_activas = serializers.IntegerField(source="active")
    llaves_usadas = serializers.IntegerField(source="redeemed")
    llaves_desactivadas = serializers.IntegerField(source="deactivated")
    capacidad_total = serializers.IntegerField(source="capacity")
    slots_disponibles = serializers.IntegerField(source="available_slots")


class KeyStatisticsSerializer(serializers.Serializer):
    """Serializer for KeyStatisticsDTO."""

    totales = KeyTotalsSerializer(source="*")
    por_juego = ProductKeyStatisticsSerializer(source="products", many=True)
