"""
GetDailyReloadTotalQuery.
"""

import uuid
from dataclasses import dataclass


@dataclass
class GetDailyReloadTotalQuery:
    """Query for the amount reloaded since local midnight."""

    account_id: uuid.UUID
