"""
GetKeyStatisticsQuery.

Query for key totals across every product an account owns.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetKeyStatisticsQuery:
    """Query to get key statistics of a developer account."""

    account_id: uuid.UUID
