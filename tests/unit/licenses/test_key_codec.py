"""
Unit tests for the license key codec.
"""
import re
import uuid

import pytest

from core.domain.exceptions import InvalidArgumentError
from licenses.domain import key_codec

KEY_PATTERN = re.compile(r"^[A-HJ-NP-Z2-9]{5}(-[A-HJ-NP-Z2-9]{5}){4}$")


def _replace_symbol(key: str, index: int) -> str:
    """Swap one symbol of a grouped key for a different alphabet symbol."""
    chars = list(key)
    current = chars[index]
    chars[index] = "A" if current != "A" else "B"
    return "".join(chars)


class TestBase32:
    """Tests for the custom base-32 encoding."""

    def test_alphabet_has_32_symbols(self):
        assert len(key_codec.ALPHABET) == 32
        assert len(set(key_codec.ALPHABET)) == 32

    def test_alphabet_excludes_ambiguous_symbols(self):
        for symbol in "0O1I":
            assert symbol not in key_codec.ALPHABET

    def test_encodes_five_bits_per_symbol(self):
        assert key_codec.to_base32(b"\x00") == "AA"
        assert key_codec.to_base32(b"\xff") == "96"

    def test_encoded_length(self):
        # 20 bytes = 160 bits = 32 symbols
        assert len(key_codec.to_base32(bytes(20))) == 32


class TestGenerateKey:
    """Tests for key generation."""

    def test_format(self):
        key = key_codec.generate_key(uuid.uuid4())
        assert KEY_PATTERN.match(key)
        assert len(key.replace("-", "")) == key_codec.KEY_LENGTH

    def test_generated_key_is_valid(self):
        product_id = uuid.uuid4()
        for _ in range(20):
            assert key_codec.is_valid_key(key_codec.generate_key(product_id))

    def test_keys_differ(self):
        product_id = uuid.uuid4()
        keys = {key_codec.generate_key(product_id) for _ in range(50)}
        assert len(keys) == 50

    def test_accepts_short_product_id(self):
        assert key_codec.is_valid_key(key_codec.generate_key("7"))

    def test_checksum_matches_payload(self):
        key = key_codec.generate_key(uuid.uuid4())
        symbols = key.replace("-", "")
        assert symbols[20:] == key_codec.compute_checksum(symbols[:20])


class TestIsValidKey:
    """Tests for key validation."""

    def test_case_and_hyphens_ignored(self):
        key = key_codec.generate_key(uuid.uuid4())
        assert key_codec.is_valid_key(key.lower())
        assert key_codec.is_valid_key(key.replace("-", ""))

    def test_single_symbol_change_in_payload_rejected(self):
        key = key_codec.generate_key(uuid.uuid4())
        assert not key_codec.is_valid_key(_replace_symbol(key, 0))

    def test_single_symbol_change_in_checksum_rejected(self):
        key = key_codec.generate_key(uuid.uuid4())
        assert not key_codec.is_valid_key(_replace_symbol(key, len(key) - 1))

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "ABCDE-FGHJK",
            "ABCDE-FGHJK-MNPQR-STUVW-XYZ23-45678",
            "0BCDE-FGHJK-MNPQR-STUVW-XYZ23",
            "OBCDE-FGHJK-MNPQR-STUVW-XYZ23",
            "1BCDE-FGHJK-MNPQR-STUVW-XYZ23",
            "IBCDE-FGHJK-MNPQR-STUVW-XYZ23",
        ],
    )
    def test_malformed_rejected(self, text):
        assert key_codec.is_valid_key(text) is False

    @pytest.mark.parametrize("value", [None, 12345, b"ABCDE"])
    def test_non_string_rejected(self, value):
        assert key_codec.is_valid_key(value) is False


class TestGenerateMany:
    """Tests for batch generation."""

    def test_distinct_keys(self):
        keys = key_codec.generate_many(uuid.uuid4(), 5)
        assert len(keys) == 5
        assert len(set(keys)) == 5

    @pytest.mark.parametrize("count", [0, 6, -1, True, 2.0, "3"])
    def test_invalid_count(self, count):
        with pytest.raises(InvalidArgumentError):
            key_codec.generate_many(uuid.uuid4(), count)


class TestFormatKey:
    """Tests for re-grouping keys."""

    def test_regroups(self):
        assert (
            key_codec.format_key("abcdefghjkmnpqrstuvwxyz23")
            == "ABCDE-FGHJK-MNPQR-STUVW-XYZ23"
        )

    def test_wrong_length(self):
        with pytest.raises(InvalidArgumentError):
            key_codec.format_key("ABCDE")
