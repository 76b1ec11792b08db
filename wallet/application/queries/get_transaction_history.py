"""
GetTransactionHistoryQuery.
"""

import uuid
from dataclasses import dataclass


@dataclass
class GetTransactionHistoryQuery:
    """Query for completed transactions, newest first."""

    account_id: uuid.UUID
    limit: int = 20
    offset: int = 0
