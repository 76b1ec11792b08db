"""
Database utilities shared by the ORM adapters.
"""

import functools
import logging

from django.db import DatabaseError

from core.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


def storage_errors(func):
    """
    Translate ``django.db.DatabaseError`` raised by an adapter method
    into ``StorageError``.

    Domain exceptions raised inside the method pass through untouched.
    Apply below ``sync_to_async`` so the translation runs in the worker
    thread next to the query.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.error(
                "Storage failure in %s", func.__qualname__, exc_info=True
            )
            raise StorageError() from exc

    return wrapper
