"""
GetBalanceQuery.
"""

import uuid
from dataclasses import dataclass


@dataclass
class GetBalanceQuery:
    """Query for an account's current balance."""

    account_id: uuid.UUID
