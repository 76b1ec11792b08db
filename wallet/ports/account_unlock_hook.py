"""
Account unlock hook port (interface).

Called after a successful reload so the limited-account policy can lift
its restriction.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import uuid


@dataclass(frozen=True)
class UnlockResult:
    """Outcome of an unlock attempt."""

    success: bool
    message: str
    just_unlocked: bool = False
    already_unlocked: bool = False
    remaining: Optional[Decimal] = None


class AccountUnlockHook(ABC):
    """Post-reload collaborator."""

    @abstractmethod
    async def maybe_unlock(self, account_id: uuid.UUID) -> UnlockResult:
        """
        Unlock the account if it now qualifies.

        Args:
            account_id: Account UUID

        Returns:
            UnlockResult
        """
        pass
