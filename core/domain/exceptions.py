"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every exception carries an
``ErrorKind`` tag; the HTTP boundary translates kinds to status codes
with a single table (see ``api.exceptions``).

Messages are user-facing and must never contain row ids or
encryption details.
"""
from decimal import Decimal
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Tagged error kinds shared by every module."""

    NOT_AUTHORIZED = "not_authorized"
    NOT_FOUND = "not_found"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_STATE = "invalid_state"
    INVALID_ARGUMENT = "invalid_argument"
    MISSING_IDEMPOTENCY_KEY = "missing_idempotency_key"
    ALREADY_PROCESSED = "already_processed"
    OPERATION_IN_PROGRESS = "operation_in_progress"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    BALANCE_LIMIT_EXCEEDED = "balance_limit_exceeded"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    STORAGE_ERROR = "storage_error"

    def __str__(self) -> str:
        """Return kind as string."""
        return self.value


def format_amount(amount: Decimal) -> str:
    """Render a currency amount the way user-facing messages show it."""
    return f"${Decimal(amount).quantize(Decimal('0.01'))}"


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, code: Optional[str] = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotAuthorizedError(DomainException):
    """Raised when the caller does not own the resource it acts on."""

    kind = ErrorKind.NOT_AUTHORIZED

    def __init__(self, message: str = "No tienes permisos para realizar esta acción"):
        super().__init__(message, code="NOT_AUTHORIZED")


class NotFoundError(DomainException):
    """Base exception for missing resources."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Recurso no encontrado", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ProductNotFoundError(NotFoundError):
    """Raised when a product (application) is not found."""

    def __init__(self, message: str = "Aplicación no encontrada"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class LicenseKeyNotFoundError(NotFoundError):
    """Raised when a license key is not found."""

    def __init__(self, message: str = "Llave no encontrada"):
        super().__init__(message, code="LICENSE_KEY_NOT_FOUND")


class AccountNotFoundError(NotFoundError):
    """Raised when a ledger account is not found."""

    def __init__(self, message: str = "Cuenta no encontrada"):
        super().__init__(message, code="ACCOUNT_NOT_FOUND")


class QuotaExceededError(DomainException):
    """Raised when a product already holds its lifetime key quota."""

    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, limit: int = 5):
        super().__init__(
            f"Límite de {limit} llaves totales alcanzado para esta aplicación",
            code="QUOTA_EXCEEDED",
        )
        self.limit = limit


class InvalidStateError(DomainException):
    """Raised when a lifecycle transition is not allowed."""

    kind = ErrorKind.INVALID_STATE

    def __init__(self, message: str = "Transición de estado no permitida"):
        super().__init__(message, code="INVALID_STATE")


class InvalidArgumentError(DomainException):
    """Raised for malformed input."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str = "Argumento inválido", code: str = "INVALID_ARGUMENT"):
        super().__init__(message, code=code)


class InvalidAmountError(InvalidArgumentError):
    """Raised when a monetary amount is malformed or out of range."""

    def __init__(self, message: str = "El monto debe ser un número válido"):
        super().__init__(message, code="INVALID_AMOUNT")


class MissingIdempotencyKeyError(DomainException):
    """Raised when a balance operation arrives without an idempotency key."""

    kind = ErrorKind.MISSING_IDEMPOTENCY_KEY

    def __init__(self, message: str = "Se requiere un identificador único para el pago"):
        super().__init__(message, code="MISSING_IDEMPOTENCY_KEY")


class AlreadyProcessedError(DomainException):
    """Raised when an idempotency key already maps to a completed transaction."""

    kind = ErrorKind.ALREADY_PROCESSED

    def __init__(self, message: str = "Esta transacción ya fue procesada"):
        super().__init__(message, code="ALREADY_PROCESSED")


class OperationInProgressError(DomainException):
    """Raised for double submissions inside the cooldown window."""

    kind = ErrorKind.OPERATION_IN_PROGRESS

    def __init__(
        self,
        message: str = "Operación en proceso. Espera unos segundos antes de intentar de nuevo.",
    ):
        super().__init__(message, code="OPERATION_IN_PROGRESS")


class InsufficientFundsError(DomainException):
    """Raised when a debit exceeds the available balance."""

    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, balance: Decimal, amount: Decimal):
        super().__init__(
            f"Fondos insuficientes. Tu balance es {format_amount(balance)} "
            f"y el precio es {format_amount(amount)}.",
            code="INSUFFICIENT_FUNDS",
        )
        self.balance = balance
        self.amount = amount


class DailyLimitExceededError(DomainException):
    """Raised when a reload would exceed the daily reload cap."""

    kind = ErrorKind.DAILY_LIMIT_EXCEEDED

    def __init__(self, remaining: Decimal):
        super().__init__(
            "Has alcanzado el límite diario de recarga. "
            f"Puedes recargar hasta {format_amount(remaining)} más hoy.",
            code="DAILY_LIMIT_EXCEEDED",
        )
        self.remaining = remaining


class BalanceLimitExceededError(DomainException):
    """Raised when a credit would push the balance over the maximum."""

    kind = ErrorKind.BALANCE_LIMIT_EXCEEDED

    def __init__(self, max_balance: Decimal, balance: Decimal):
        super().__init__(
            "El balance resultante excedería el límite máximo de "
            f"{format_amount(max_balance)}. Tu balance actual es {format_amount(balance)}.",
            code="BALANCE_LIMIT_EXCEEDED",
        )
        self.max_balance = max_balance
        self.balance = balance


class ConcurrentModificationError(DomainException):
    """Raised when the optimistic balance check loses a race."""

    kind = ErrorKind.CONCURRENT_MODIFICATION

    def __init__(self, message: str = "Error de concurrencia. Por favor, intenta de nuevo."):
        super().__init__(message, code="CONCURRENT_MODIFICATION")


class StorageError(DomainException):
    """Wraps failures of the underlying storage adapter."""

    kind = ErrorKind.STORAGE_ERROR

    def __init__(
        self,
        message: str = "Error al acceder al almacenamiento. Intenta de nuevo.",
        code: str = "STORAGE_ERROR",
    ):
        super().__init__(message, code=code)


class DecryptionError(StorageError):
    """Raised when a stored ciphertext cannot be decrypted."""

    def __init__(self, message: str = "Error al descifrar datos sensibles"):
        super().__init__(message, code="DECRYPTION_ERROR")
