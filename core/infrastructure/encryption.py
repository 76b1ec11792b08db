"""
Symmetric encryption for secrets stored at rest.

License keys are persisted only as ciphertext. The blob is
self-contained: ``v1:<nonce hex>:<ciphertext hex>:<tag hex>``.
"""

import hashlib
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from asgiref.sync import sync_to_async
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from django.conf import settings

from core.domain.exceptions import DecryptionError

logger = logging.getLogger(__name__)

BLOB_VERSION = "v1"
NONCE_SIZE = 12
TAG_SIZE = 16


class EncryptionProvider(ABC):
    """Port for the process-wide key-encryption routine."""

    @abstractmethod
    async def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a plaintext string.

        Args:
            plaintext: Value to protect

        Returns:
            Self-contained ciphertext blob
        """
        pass

    @abstractmethod
    async def decrypt(self, blob: str) -> str:
        """
        Decrypt a blob produced by ``encrypt``.

        Args:
            blob: Ciphertext blob

        Returns:
            Original plaintext

        Raises:
            DecryptionError: If the blob is malformed or was tampered with
        """
        pass


class AesGcmEncryptionProvider(EncryptionProvider):
    """
    AES-256-GCM provider.

    The 256-bit key is the SHA-256 digest of the configured secret.
    """

    def __init__(self, secret: Optional[str] = None):
        secret = secret if secret is not None else settings.KEY_ENCRYPTION_SECRET
        if not secret:
            raise ValueError("KEY_ENCRYPTION_SECRET must be configured")
        self._aead = AESGCM(hashlib.sha256(secret.encode("utf-8")).digest())

    def encrypt_sync(self, plaintext: str) -> str:
        """Encrypt without leaving the calling thread."""
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
        return ":".join((BLOB_VERSION, nonce.hex(), ciphertext.hex(), tag.hex()))

    def decrypt_sync(self, blob: str) -> str:
        """Decrypt without leaving the calling thread."""
        try:
            version, nonce_hex, ciphertext_hex, tag_hex = blob.split(":")
            if version != BLOB_VERSION:
                raise ValueError(f"unsupported blob version {version!r}")
            nonce = bytes.fromhex(nonce_hex)
            tag = bytes.fromhex(tag_hex)
            if len(nonce) != NONCE_SIZE or len(tag) != TAG_SIZE:
                raise ValueError("bad nonce or tag size")
            plaintext = self._aead.decrypt(nonce, bytes.fromhex(ciphertext_hex) + tag, None)
            return plaintext.decode("utf-8")
        except (AttributeError, ValueError, InvalidTag) as exc:
            # Never log the blob itself.
            logger.error("Ciphertext rejected: %s", type(exc).__name__)
            raise DecryptionError() from exc

    async def encrypt(self, plaintext: str) -> str:
        return await sync_to_async(self.encrypt_sync, thread_sensitive=False)(plaintext)

    async def decrypt(self, blob: str) -> str:
        return await sync_to_async(self.decrypt_sync, thread_sensitive=False)(blob)
