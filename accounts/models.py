"""
Model registry for the accounts app.

Django discovers an app's models through ``<app>.models``; the ORM
classes themselves live with the other adapters in ``infrastructure``.
"""
from accounts.infrastructure.models import Account  # noqa: F401
