"""
License key codec.

Keys look like ``XXXXX-XXXXX-XXXXX-XXXXX-CCCCC``: a 20-symbol random
payload followed by a 5-symbol CRC-32 checksum, both written in a
32-symbol alphabet without the look-alike characters ``0 O 1 I``.

The checksum only catches typos before a round trip to the server. It
is not a security boundary; issued keys are also checked against the
stored ciphertexts.
"""

import secrets
import zlib
from typing import Any, List

from core.domain.exceptions import InvalidArgumentError

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
KEY_LENGTH = 25
PAYLOAD_LENGTH = 20
CHECKSUM_LENGTH = 5
GROUP_SIZE = 5
MAX_BATCH_SIZE = 5

RANDOM_BYTES = 15
BINDING_BYTES = 5

_ALPHABET_SET = frozenset(ALPHABET)


def to_base32(data: bytes) -> str:
    """
    Encode bytes five bits at a time over ``ALPHABET``.

    The trailing group is right-padded with zero bits; no ``=`` padding
    is emitted.
    """
    bits = "".join(f"{byte:08b}" for byte in data)
    return "".join(
        ALPHABET[int(bits[i:i + 5].ljust(5, "0"), 2)] for i in range(0, len(bits), 5)
    )


def compute_checksum(payload: str) -> str:
    """
    Checksum suffix for a 20-symbol payload.

    CRC-32 of the payload text, taken as four big-endian bytes,
    base-32 encoded and cut to five symbols.
    """
    crc = zlib.crc32(payload.encode("ascii")) & 0xFFFFFFFF
    return to_base32(crc.to_bytes(4, "big"))[:CHECKSUM_LENGTH]


def group(symbols: str) -> str:
    """Insert a hyphen every ``GROUP_SIZE`` symbols."""
    return "-".join(symbols[i:i + GROUP_SIZE] for i in range(0, len(symbols), GROUP_SIZE))


def normalize_key(text: str) -> str:
    """Strip hyphens and uppercase."""
    return text.replace("-", "").upper()


def generate_key(product_id: Any) -> str:
    """
    Generate a new grouped license key for a product.

    The last five characters of the product id are mixed in after the
    random bytes. This is obscurity only: with a 20-symbol payload just
    the first 100 random bits make it into the key, so uniqueness rests
    entirely on the random part.

    Args:
        product_id: Owning product identifier

    Returns:
        Key in ``XXXXX-XXXXX-XXXXX-XXXXX-CCCCC`` form
    """
    binding = str(product_id)[-BINDING_BYTES:].encode("utf-8")[:BINDING_BYTES]
    payload = to_base32(secrets.token_bytes(RANDOM_BYTES) + binding)[:PAYLOAD_LENGTH]
    return group(payload + compute_checksum(payload))


def is_valid_key(text: Any) -> bool:
    """
    Check length, alphabet and checksum of a key.

    Hyphens and case are ignored. Anything that is not a string is
    invalid.
    """
    if not isinstance(text, str):
        return False
    symbols = normalize_key(text)
    if len(symbols) != KEY_LENGTH or not _ALPHABET_SET.issuperset(symbols):
        return False
    payload, checksum = symbols[:PAYLOAD_LENGTH], symbols[PAYLOAD_LENGTH:]
    return compute_checksum(payload) == checksum


def generate_many(product_id: Any, count: int) -> List[str]:
    """
    Generate ``count`` pairwise-distinct keys.

    Raises:
        InvalidArgumentError: If count is not an integer in [1, 5]
    """
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_BATCH_SIZE:
        raise InvalidArgumentError(f"La cantidad debe estar entre 1 y {MAX_BATCH_SIZE}")
    keys: List[str] = []
    seen = set()
    while len(keys) < count:
        key = generate_key(product_id)
        if key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


def format_key(text: str) -> str:
    """
    Re-group a key typed without hyphens or in lowercase.

    Only the length is checked; use ``is_valid_key`` for the checksum.

    Raises:
        InvalidArgumentError: If the key does not hold 25 symbols
    """
    symbols = normalize_key(text) if isinstance(text, str) else ""
    if len(symbols) != KEY_LENGTH:
        raise InvalidArgumentError("Formato de llave inválido", code="INVALID_KEY_FORMAT")
    return group(symbols)
