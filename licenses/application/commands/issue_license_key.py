"""
IssueLicenseKeyCommand.

Command to issue a new license key for a product.
"""
import uuid
from dataclasses import dataclass


@dataclass
class IssueLicenseKeyCommand:
    """Command to issue a license key."""

    product_id: uuid.UUID
    account_id: uuid.UUID
