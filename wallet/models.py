"""
Model registry for the wallet app.
"""
from wallet.infrastructure.models import WalletTransaction  # noqa: F401
