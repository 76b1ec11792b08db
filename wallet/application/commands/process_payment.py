"""
ProcessPaymentCommand.

Command to debit an account for a purchase.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ProcessPaymentCommand:
    """
    Command to process a payment.

    ``idempotency_key`` is mandatory and should be generated once per
    purchase click, then reused on retries.
    """

    account_id: uuid.UUID
    amount: Any
    description: str
    idempotency_key: Optional[str]
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
