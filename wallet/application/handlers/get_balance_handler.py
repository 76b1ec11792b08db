"""
GetBalanceHandler.

Handles the get balance query.
"""

from accounts.ports.account_repository import AccountRepository
from core.domain.exceptions import AccountNotFoundError
from wallet.application.dto.wallet_dto import BalanceDTO
from wallet.application.queries.get_balance import GetBalanceQuery


class GetBalanceHandler:
    """Handler for GetBalanceQuery."""

    def __init__(self, account_repository: AccountRepository):
        """Initialize handler with repositories."""
        self.account_repository = account_repository

    async def handle(self, query: GetBalanceQuery) -> BalanceDTO:
        """
        Handle get balance query.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = await self.account_repository.find_by_id(query.account_id)
        if account is None:
            raise AccountNotFoundError()
        return BalanceDTO(
            account_id=account.id, balance=account.balance, is_limited=account.is_limited
        )
