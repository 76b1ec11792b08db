"""
Model registry for the licenses app.
"""
from licenses.infrastructure.models import LicenseKey  # noqa: F401
