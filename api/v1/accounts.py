"""
Caller resolution shared by the v1 views.
"""

import uuid

from rest_framework.request import Request

from core.domain.exceptions import NotAuthorizedError


def caller_account_id(request: Request) -> uuid.UUID:
    """
    Account id of the authenticated user.

    Runs a query through the reverse one-to-one, so call it from the
    synchronous view method, before switching to the async handler.

    Raises:
        NotAuthorizedError: If the user has no ledger account
    """
    account = getattr(request.user, "account", None)
    if account is None:
        raise NotAuthorizedError("Tu usuario no tiene una cuenta asociada")
    return account.id
