"""
ReloadWalletCommand.

Command to credit an account's wallet.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ReloadWalletCommand:
    """Command to reload a wallet. Without a key one is derived per call."""

    account_id: uuid.UUID
    amount: Any
    idempotency_key: Optional[str] = None
