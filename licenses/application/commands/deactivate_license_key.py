"""
DeactivateLicenseKeyCommand.

Command to deactivate an issued license key.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class DeactivateLicenseKeyCommand:
    """Command to deactivate a license key."""

    license_key_id: uuid.UUID
    account_id: uuid.UUID
    reason: Optional[str] = None
