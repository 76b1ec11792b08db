"""
Development settings for StorefrontCoreService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - Use PostgreSQL in Docker, SQLite for local development
# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Development-only fallback; never used outside DEBUG.
KEY_ENCRYPTION_SECRET = os.environ.get("ENCRYPTION_KEY", "dev-key-encryption-secret")

# Email backend for development
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
