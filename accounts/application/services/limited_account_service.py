"""
Limited account service.

New accounts start limited: they cannot buy, sell or trade until their
lifetime reloads reach the unlock amount. The wallet calls
``maybe_unlock`` after every successful reload.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from django.conf import settings

from accounts.application.dto.account_dto import AccountStatusDTO
from accounts.ports.account_repository import AccountRepository
from core.domain.exceptions import format_amount
from core.domain.value_objects import TransactionType, quantize_amount
from wallet.ports.account_unlock_hook import AccountUnlockHook, UnlockResult
from wallet.ports.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)

RESTRICTED_OPERATIONS = ["purchase", "sell", "trade", "trade_offer"]

MESSAGES = {
    "generic": "Tu cuenta está limitada. Recarga al menos $5.00 en tu billetera para desbloquear todas las funciones.",
    "purchase": "No puedes comprar artículos con una cuenta limitada. Recarga al menos $5.00 para habilitar las compras.",
    "sell": "No puedes vender artículos con una cuenta limitada. Recarga al menos $5.00 para habilitar las ventas.",
    "trade": "No puedes crear intercambios con una cuenta limitada. Recarga al menos $5.00 para habilitar los intercambios.",
    "trade_offer": "No puedes enviar ofertas de intercambio con una cuenta limitada. Recarga al menos $5.00 para participar en intercambios.",
}

ALREADY_UNLOCKED_MESSAGE = "Tu cuenta ya está desbloqueada"
UNLOCKED_MESSAGE = (
    "¡Felicidades! Tu cuenta ha sido desbloqueada. Ya puedes comprar, vender e intercambiar."
)


def error_message(operation: str) -> str:
    """User-facing message for a restricted operation."""
    return MESSAGES.get(operation, MESSAGES["generic"])


class LimitedAccountService(AccountUnlockHook):
    """Tracks and lifts the limited-account restriction."""

    def __init__(
        self,
        account_repository: AccountRepository,
        transaction_repository: TransactionRepository,
        unlock_amount: Optional[Decimal] = None,
    ):
        self.account_repository = account_repository
        self.transaction_repository = transaction_repository
        if unlock_amount is None:
            unlock_amount = getattr(settings, "LIMITED_ACCOUNT_UNLOCK_AMOUNT", Decimal("5.00"))
        self.unlock_amount = quantize_amount(Decimal(unlock_amount))

    async def is_account_limited(self, account_id: uuid.UUID) -> bool:
        """Missing accounts count as limited."""
        account = await self.account_repository.find_by_id(account_id)
        return True if account is None else account.is_limited

    async def get_total_reloaded(self, account_id: uuid.UUID) -> Decimal:
        """Lifetime total of completed reloads."""
        return await self.transaction_repository.sum_completed(account_id, TransactionType.RELOAD)

    async def check_unlock_eligibility(self, account_id: uuid.UUID):
        """
        Compare lifetime reloads against the unlock amount.

        Returns:
            Tuple of (eligible, total_reloaded, remaining)
        """
        total = await self.get_total_reloaded(account_id)
        remaining = max(self.unlock_amount - total, Decimal("0.00"))
        return total >= self.unlock_amount, total, quantize_amount(remaining)

    async def maybe_unlock(self, account_id: uuid.UUID) -> UnlockResult:
        """
        Unlock the account if its reloads reach the unlock amount.

        Args:
            account_id: Account UUID

        Returns:
            UnlockResult; ``just_unlocked`` is True only for the call that
            flipped the flag
        """
        if not await self.is_account_limited(account_id):
            return UnlockResult(
                success=True, message=ALREADY_UNLOCKED_MESSAGE, already_unlocked=True
            )

        eligible, _, remaining = await self.check_unlock_eligibility(account_id)
        if not eligible:
            return UnlockResult(
                success=False,
                message=f"Necesitas recargar {format_amount(remaining)} más para desbloquear tu cuenta.",
                remaining=remaining,
            )

        if not await self.account_repository.set_unlocked(account_id):
            # Another reload unlocked it first.
            return UnlockResult(
                success=True, message=ALREADY_UNLOCKED_MESSAGE, already_unlocked=True
            )

        logger.info("Account unlocked", extra={"account_id": str(account_id)})
        return UnlockResult(success=True, message=UNLOCKED_MESSAGE, just_unlocked=True)

    async def get_account_status(self, account_id: uuid.UUID) -> AccountStatusDTO:
        """
        Limited-account status for the account holder.

        Args:
            account_id: Account UUID

        Returns:
            AccountStatusDTO
        """
        is_limited = await self.is_account_limited(account_id)
        eligible, total, remaining = await self.check_unlock_eligibility(account_id)
        return AccountStatusDTO(
            is_limited=is_limited,
            total_reloaded=total,
            unlock_amount=self.unlock_amount,
            remaining=remaining,
            can_unlock=eligible and is_limited,
            restricted_operations=list(RESTRICTED_OPERATIONS) if is_limited else [],
        )
