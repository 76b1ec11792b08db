"""
GetTransactionHistoryHandler.

Handles the transaction history query.
"""

from typing import List

from core.domain.exceptions import InvalidArgumentError
from wallet.application.dto.wallet_dto import TransactionDTO
from wallet.application.queries.get_transaction_history import GetTransactionHistoryQuery
from wallet.ports.transaction_repository import TransactionRepository

MAX_PAGE_SIZE = 100


class GetTransactionHistoryHandler:
    """Handler for GetTransactionHistoryQuery."""

    def __init__(self, transaction_repository: TransactionRepository):
        """Initialize handler with repositories."""
        self.transaction_repository = transaction_repository

    async def handle(self, query: GetTransactionHistoryQuery) -> List[TransactionDTO]:
        """
        Handle transaction history query.

        Args:
            query: GetTransactionHistoryQuery

        Returns:
            Completed transactions, newest first

        Raises:
            InvalidArgumentError: If limit or offset is out of range
        """
        if not 1 <= query.limit <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(f"El límite debe estar entre 1 y {MAX_PAGE_SIZE}")
        if query.offset < 0:
            raise InvalidArgumentError("El desplazamiento no puede ser negativo")

        transactions = await self.transaction_repository.list_completed(
            query.account_id, query.limit, query.offset
        )
        return [TransactionDTO.from_entity(transaction) for transaction in transactions]
