"""
License key API views.

These endpoints are used by developer accounts to:
- Issue keys for their products
- List and deactivate issued keys
- See key totals across their products
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.accounts import caller_account_id
from api.v1.keys.serializers import (
    DeactivatedLicenseKeySerializer,
    DeactivateLicenseKeyRequestSerializer,
    IssuedLicenseKeySerializer,
    KeyStatisticsSerializer,
    LicenseKeyListSerializer,
)
from core.infrastructure.encryption import AesGcmEncryptionProvider
from licenses.application.commands.deactivate_license_key import DeactivateLicenseKeyCommand
from licenses.application.commands.issue_license_key import IssueLicenseKeyCommand
from licenses.application.handlers.deactivate_license_key_handler import (
    DeactivateLicenseKeyHandler,
)
from licenses.application.handlers.get_key_statistics_handler import GetKeyStatisticsHandler
from licenses.application.handlers.issue_license_key_handler import IssueLicenseKeyHandler
from licenses.application.handlers.list_license_keys_handler import ListLicenseKeysHandler
from licenses.application.queries.get_key_statistics import GetKeyStatisticsQuery
from licenses.application.queries.list_license_keys import ListLicenseKeysQuery
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from products.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)

# Initialize repositories (in production, use DI container)
_license_key_repo = DjangoLicenseKeyRepository()
_product_repo = DjangoProductRepository()


def _encryption() -> AesGcmEncryptionProvider:
    # Built per request so the secret is read from the active settings.
    return AesGcmEncryptionProvider()


class ProductKeysView(APIView):
    """Issue and list keys of one product."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="issue_license_key",
        summary="Issue License Key",
        description=(
            "Generate a new key for a product you own. The plaintext key is "
            "returned only in this response. Each product can hold at most 5 keys "
            "over its lifetime."
        ),
        tags=["License Keys"],
        request=None,
        responses={
            201: IssuedLicenseKeySerializer,
            403: {"description": "Not the owner of the product"},
            422: {"description": "Key quota reached"},
        },
    )
    def post(self, request: Request, product_id: uuid.UUID) -> Response:
        """Issue a key."""
        account_id = caller_account_id(request)
        handler = IssueLicenseKeyHandler(
            product_repository=_product_repo,
            license_key_repository=_license_key_repo,
            encryption=_encryption(),
        )
        result = async_to_sync(handler.handle)(
            IssueLicenseKeyCommand(product_id=product_id, account_id=account_id)
        )
        return Response(IssuedLicenseKeySerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_license_keys",
        summary="List License Keys",
        description="List every key of a product you own, decrypted, with counts by state.",
        tags=["License Keys"],
        responses={
            200: LicenseKeyListSerializer,
            403: {"description": "Not the owner of the product"},
        },
    )
    def get(self, request: Request, product_id: uuid.UUID) -> Response:
        """List keys."""
        account_id = caller_account_id(request)
        handler = ListLicenseKeysHandler(
            product_repository=_product_repo,
            license_key_repository=_license_key_repo,
            encryption=_encryption(),
        )
        result = async_to_sync(handler.handle)(
            ListLicenseKeysQuery(product_id=product_id, account_id=account_id)
        )
        return Response(LicenseKeyListSerializer(result).data)


class DeactivateLicenseKeyView(APIView):
    """Deactivate one key."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="deactivate_license_key",
        summary="Deactivate License Key",
        description="Deactivate an active key of a product you own. Redeemed keys cannot be deactivated.",
        tags=["License Keys"],
        request=DeactivateLicenseKeyRequestSerializer,
        responses={
            200: DeactivatedLicenseKeySerializer,
            403: {"description": "Not the owner of the key's product"},
            404: {"description": "Key not found"},
            409: {"description": "Key already deactivated or redeemed"},
        },
    )
    def post(self, request: Request, license_key_id: uuid.UUID) -> Response:
        """Deactivate a key."""
        serializer = DeactivateLicenseKeyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account_id = caller_account_id(request)

        handler = DeactivateLicenseKeyHandler(
            product_repository=_product_repo,
            license_key_repository=_license_key_repo,
        )
        result = async_to_sync(handler.handle)(
            DeactivateLicenseKeyCommand(
                license_key_id=license_key_id,
                account_id=account_id,
                reason=serializer.validated_data.get("motivo"),
            )
        )
        return Response(DeactivatedLicenseKeySerializer(result).data)


class KeyStatisticsView(APIView):
    """Key totals of the caller's products."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_key_statistics",
        summary="Key Statistics",
        description="Totals across every product you own, with a per-product breakdown.",
        tags=["License Keys"],
        responses={200: KeyStatisticsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get statistics."""
        account_id = caller_account_id(request)
        handler = GetKeyStatisticsHandler(
            product_repository=_product_repo,
            license_key_repository=_license_key_repo,
        )
        result = async_to_sync(handler.handle)(GetKeyStatisticsQuery(account_id=account_id))
        return Response(KeyStatisticsSerializer(result).data)
