"""
Hamming distance between hex-encoded hashes.
"""

from __future__ import annotations

from typing import Optional

from .bits import HEX_RE
from .errors import InvalidHashError

# Set-bit count for every byte value
_POPCOUNT = tuple(bin(i).count('1') for i in range(256))


def validate_hex(value, expected_length: Optional[int] = None) -> str:
    """
    Check that a value is a well-formed hex hash.

    Args:
        value: Candidate hash string
        expected_length: Required number of hex characters, if any

    Returns:
        The value unchanged

    Raises:
        InvalidHashError: If the value is not a non-empty, even-length hex
            string of the expected length
    """
    if not isinstance(value, str):
        raise InvalidHashError(f"Hash must be a string, got {type(value).__name__}")

    if not value:
        raise InvalidHashError("Hash is empty")

    if not HEX_RE.match(value):
        raise InvalidHashError(f"Hash contains non-hex characters: {value!r}")

    if len(value) % 2:
        raise InvalidHashError(f"Hash has an odd number of hex digits: {value!r}")

    if expected_length is not None and len(value) != expected_length:
        raise InvalidHashError(
            f"Hash must be {expected_length} hex characters, got {len(value)}"
        )

    return value


def hamming_distance(hash1: str, hash2: str, expected_length: Optional[int] = None) -> int:
    """
    Count the differing bits between two hex hashes.

    Both strings are decoded to bytes; the shorter one is left-padded with
    zero bytes, the pair is XORed byte by byte and the set bits are summed.

    Args:
        hash1: First hex hash
        hash2: Second hex hash
        expected_length: Required length of both hashes, if any

    Returns:
        Number of differing bits (0 = identical)

    Raises:
        InvalidHashError: If either input is malformed

    Examples:
        >>> hamming_distance('ff00', 'f0f0')
        8
        >>> hamming_distance('01', '0001')
        0
    """
    raw1 = bytes.fromhex(validate_hex(hash1, expected_length))
    raw2 = bytes.fromhex(validate_hex(hash2, expected_length))

    max_len = max(len(raw1), len(raw2))
    raw1 = raw1.rjust(max_len, b'\0')
    raw2 = raw2.rjust(max_len, b'\0')

    return sum(_POPCOUNT[a ^ b] for a, b in zip(raw1, raw2))


__all__ = ['validate_hex', 'hamming_distance']
