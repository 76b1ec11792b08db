"""
Unit tests for the AES-GCM encryption provider.
"""
import pytest

from core.domain.exceptions import DecryptionError
from core.infrastructure.encryption import AesGcmEncryptionProvider

KEY = "ABCDE-FGHJK-MNPQR-STUVW-XYZ23"


@pytest.fixture
def provider():
    return AesGcmEncryptionProvider(secret="unit-test-secret")


class TestAesGcmEncryptionProvider:
    """Tests for AesGcmEncryptionProvider."""

    def test_blob_layout(self, provider):
        blob = provider.encrypt_sync(KEY)
        version, nonce, ciphertext, tag = blob.split(":")
        assert version == "v1"
        assert len(bytes.fromhex(nonce)) == 12
        assert len(bytes.fromhex(tag)) == 16
        assert len(bytes.fromhex(ciphertext)) == len(KEY)
        assert KEY not in blob

    def test_fresh_nonce_per_call(self, provider):
        assert provider.encrypt_sync(KEY) != provider.encrypt_sync(KEY)

    def test_decrypt(self, provider):
        assert provider.decrypt_sync(provider.encrypt_sync(KEY)) == KEY

    def test_tampered_tag(self, provider):
        blob = provider.encrypt_sync(KEY)
        flipped = blob[:-1] + ("0" if blob[-1] != "0" else "1")
        with pytest.raises(DecryptionError):
            provider.decrypt_sync(flipped)

    def test_wrong_secret(self, provider):
        blob = provider.encrypt_sync(KEY)
        with pytest.raises(DecryptionError):
            AesGcmEncryptionProvider(secret="another-secret").decrypt_sync(blob)

    @pytest.mark.parametrize("blob", ["", "v1:zz", "v2:00:00:00", "v1:00:00:00", None])
    def test_malformed(self, provider, blob):
        with pytest.raises(DecryptionError):
            provider.decrypt_sync(blob)

    def test_secret_required(self):
        with pytest.raises(ValueError):
            AesGcmEncryptionProvider(secret="")

    @pytest.mark.asyncio
    async def test_async_api(self, provider):
        blob = await provider.encrypt(KEY)
        assert await provider.decrypt(blob) == KEY
