"""
Balance ledger port (interface).

The ledger applies a mutation to the balance and records its
transaction in a single atomic step.
"""
from abc import ABC, abstractmethod
from datetime import datetime

from wallet.domain.transaction import BalanceMutation, LedgerEntry


class AtomicMutationUnavailable(Exception):
    """The atomic primitive cannot be used; callers fall back."""


class BalanceLedger(ABC):
    """Atomic balance mutation primitive."""

    @abstractmethod
    async def apply_atomic(
        self, mutation: BalanceMutation, now: datetime, stale_before: datetime
    ) -> LedgerEntry:
        """
        Claim the idempotency key, check and move the balance, and
        complete the transaction, all or nothing.

        A failed balance check still records the transaction as failed
        before the error is raised.

        Args:
            mutation: What to apply
            now: Timestamp for the transaction row
            stale_before: Pending rows last touched before this may be reclaimed

        Returns:
            LedgerEntry with the completed transaction and new balance

        Raises:
            AtomicMutationUnavailable: If the primitive is disabled
            IdempotencyKeyTaken: If the key is held by a live transaction
            InsufficientFundsError: If a debit exceeds the balance
            BalanceLimitExceededError: If a credit exceeds the maximum balance
            AccountNotFoundError: If the account does not exist
        """
        pass
