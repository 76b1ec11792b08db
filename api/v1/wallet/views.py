"""
Wallet API views.

These endpoints are used by account holders to:
- Check their balance and limited-account status
- Reload their wallet and pay for purchases
- Read their daily reload total and transaction history
"""

from decimal import Decimal

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.services.limited_account_service import LimitedAccountService
from accounts.infrastructure.repositories.django_account_repository import (
    DjangoAccountRepository,
)
from api.v1.accounts import caller_account_id
from api.v1.wallet.serializers import (
    AccountStatusSerializer,
    BalanceSerializer,
    DailyReloadTotalSerializer,
    PaymentResultSerializer,
    ProcessPaymentRequestSerializer,
    ReloadResultSerializer,
    ReloadWalletRequestSerializer,
    TransactionHistoryQuerySerializer,
    TransactionHistorySerializer,
)
from wallet.application.commands.process_payment import ProcessPaymentCommand
from wallet.application.commands.reload_wallet import ReloadWalletCommand
from wallet.application.handlers.get_balance_handler import GetBalanceHandler
from wallet.application.handlers.get_daily_reload_total_handler import (
    GetDailyReloadTotalHandler,
)
from wallet.application.handlers.get_transaction_history_handler import (
    GetTransactionHistoryHandler,
)
from wallet.application.handlers.process_payment_handler import ProcessPaymentHandler
from wallet.application.handlers.reload_wallet_handler import ReloadWalletHandler
from wallet.application.queries.get_balance import GetBalanceQuery
from wallet.application.queries.get_daily_reload_total import GetDailyReloadTotalQuery
from wallet.application.queries.get_transaction_history import GetTransactionHistoryQuery
from wallet.application.services.ledger_service import LedgerService
from wallet.domain.limits import WalletLimits
from wallet.infrastructure.lock_stores import CacheOperationLockStore
from wallet.infrastructure.repositories.django_balance_ledger import DjangoBalanceLedger
from wallet.infrastructure.repositories.django_transaction_repository import (
    DjangoTransactionRepository,
)

# Initialize repositories (in production, use DI container)
_account_repo = DjangoAccountRepository()
_transaction_repo = DjangoTransactionRepository()

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Alternative to the idempotency_key body field",
)


def _limits() -> WalletLimits:
    return WalletLimits.from_mapping(getattr(settings, "WALLET_LIMITS", {}))


def _ledger_service(limits: WalletLimits) -> LedgerService:
    return LedgerService(
        account_repository=_account_repo,
        transaction_repository=_transaction_repo,
        balance_ledger=DjangoBalanceLedger(),
        limits=limits,
    )


def _limited_account_service() -> LimitedAccountService:
    return LimitedAccountService(
        account_repository=_account_repo,
        transaction_repository=_transaction_repo,
    )


def _idempotency_key(request: Request, validated_data: dict):
    """Body field first, then the ``Idempotency-Key`` header."""
    return validated_data.get("idempotency_key") or request.META.get("HTTP_IDEMPOTENCY_KEY")


class BalanceView(APIView):
    """Current balance of the caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_balance",
        summary="Get Balance",
        tags=["Wallet"],
        responses={200: BalanceSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get balance."""
        account_id = caller_account_id(request)
        handler = GetBalanceHandler(account_repository=_account_repo)
        result = async_to_sync(handler.handle)(GetBalanceQuery(account_id=account_id))
        return Response(BalanceSerializer(result).data)


class ReloadWalletView(APIView):
    """Add money to the caller's wallet."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="reload_wallet",
        summary="Reload Wallet",
        description=(
            "Credit the wallet. Amounts run from $1.00 to $500.00 with at most "
            "two decimals; reloads are capped at $1000.00 per day and the balance "
            "at $10000.00. A missing idempotency key is derived server-side."
        ),
        tags=["Wallet"],
        parameters=[IDEMPOTENCY_HEADER],
        request=ReloadWalletRequestSerializer,
        responses={
            200: ReloadResultSerializer,
            400: {"description": "Invalid amount"},
            409: {"description": "Already processed"},
            422: {"description": "Daily or balance limit exceeded"},
            429: {"description": "Reload in progress"},
        },
    )
    def post(self, request: Request) -> Response:
        """Reload the wallet."""
        serializer = ReloadWalletRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account_id = caller_account_id(request)

        limits = _limits()
        handler = ReloadWalletHandler(
            transaction_repository=_transaction_repo,
            ledger_service=_ledger_service(limits),
            lock_store=CacheOperationLockStore(),
            unlock_hook=_limited_account_service(),
            limits=limits,
        )
        result = async_to_sync(handler.handle)(
            ReloadWalletCommand(
                account_id=account_id,
                amount=serializer.validated_data["amount"],
                idempotency_key=_idempotency_key(request, serializer.validated_data),
            )
        )
        return Response(ReloadResultSerializer(result).data)


class ProcessPaymentView(APIView):
    """Pay for a purchase from the caller's wallet."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="process_payment",
        summary="Process Payment",
        description=(
            "Debit the wallet. An idempotency key is required; reuse it when "
            "retrying the same purchase."
        ),
        tags=["Wallet"],
        parameters=[IDEMPOTENCY_HEADER],
        request=ProcessPaymentRequestSerializer,
        responses={
            200: PaymentResultSerializer,
            400: {"description": "Invalid amount or missing idempotency key"},
            409: {"description": "Already processed"},
            422: {"description": "Insufficient funds"},
            429: {"description": "Payment in progress"},
        },
    )
    def post(self, request: Request) -> Response:
        """Process a payment."""
        serializer = ProcessPaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account_id = caller_account_id(request)
        data = serializer.validated_data

        limits = _limits()
        handler = ProcessPaymentHandler(
            transaction_repository=_transaction_repo,
            ledger_service=_ledger_service(limits),
            lock_store=CacheOperationLockStore(),
            limits=limits,
        )
        result = async_to_sync(handler.handle)(
            ProcessPaymentCommand(
                account_id=account_id,
                amount=data["amount"],
                description=data["description"],
                idempotency_key=_idempotency_key(request, data),
                reference_type=data.get("reference_type") or None,
                reference_id=data.get("reference_id") or None,
            )
        )
        return Response(PaymentResultSerializer(result).data)


class DailyReloadTotalView(APIView):
    """Today's reload total of the caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_daily_reload_total",
        summary="Daily Reload Total",
        tags=["Wallet"],
        responses={200: DailyReloadTotalSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get today's reload total."""
        account_id = caller_account_id(request)
        limits = _limits()
        handler = GetDailyReloadTotalHandler(transaction_repository=_transaction_repo)
        total = async_to_sync(handler.handle)(GetDailyReloadTotalQuery(account_id=account_id))
        remaining = max(limits.MAX_DAILY_RELOAD - total, Decimal("0.00"))
        return Response(
            DailyReloadTotalSerializer(
                {"total": total, "limit": limits.MAX_DAILY_RELOAD, "remaining": remaining}
            ).data
        )


class TransactionHistoryView(APIView):
    """Completed transactions of the caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_transaction_history",
        summary="Transaction History",
        tags=["Wallet"],
        parameters=[
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="offset", type=int, location=OpenApiParameter.QUERY),
        ],
        responses={200: TransactionHistorySerializer},
    )
    def get(self, request: Request) -> Response:
        """List transactions, newest first."""
        params = TransactionHistoryQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        limit = params.validated_data["limit"]
        offset = params.validated_data["offset"]
        account_id = caller_account_id(request)

        handler = GetTransactionHistoryHandler(transaction_repository=_transaction_repo)
        transactions = async_to_sync(handler.handle)(
            GetTransactionHistoryQuery(account_id=account_id, limit=limit, offset=offset)
        )
        return Response(
            TransactionHistorySerializer(
                {
                    "transactions": transactions,
                    "pagination": {
                        "limit": limit,
                        "offset": offset,
                        "has_more": len(transactions) == limit,
                    },
                }
            ).data
        )


class AccountStatusView(APIView):
    """Limited-account status of the caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_account_status",
        summary="Account Status",
        description="Whether the account is limited and how much more it must reload to unlock.",
        tags=["Wallet"],
        responses={200: AccountStatusSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get limited-account status."""
        account_id = caller_account_id(request)
        result = async_to_sync(_limited_account_service().get_account_status)(account_id)
        return Response(AccountStatusSerializer(result).data)
