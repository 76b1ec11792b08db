"""
ListLicenseKeysQuery.

Query to list every key of a product.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ListLicenseKeysQuery:
    """Query to list license keys of a product for its owner."""

    product_id: uuid.UUID
    account_id: uuid.UUID
