"""
Bit string packing for the hashing package.

Hashes are built as strings of '0'/'1' characters and persisted as fixed
length lowercase hex. Encoding right-pads; the generic decoder left-pads.
Stored hashes depend on this exact layout, so both directions keep it.
"""

from __future__ import annotations

import re

from ..config import HASH_BITS, HASH_HEX_LENGTH
from .errors import InvalidHashError

HEX_RE = re.compile(r'^[0-9a-fA-F]+$')


def fit_bits(bits: str, length: int = HASH_BITS) -> str:
    """
    Repeat a bit string end-to-end until it reaches ``length``, then truncate.

    Args:
        bits: String of '0' and '1' characters
        length: Exact output length

    Returns:
        Bit string of exactly ``length`` characters

    Examples:
        >>> fit_bits('101', 8)
        '10110110'
    """
    if not bits:
        raise ValueError("Cannot extend an empty bit string")

    while len(bits) < length:
        bits += bits

    return bits[:length]


def bits_to_hex(bits: str, hex_length: int = HASH_HEX_LENGTH) -> str:
    """
    Convert a bit string to a fixed-length lowercase hex string.

    The bit string is right-padded with '0' to a multiple of 4, each nibble
    becomes one hex digit, and the result is right-padded with '0' up to
    ``hex_length``. Trailing padding digits carry no image information.

    Examples:
        >>> bits_to_hex('1010', 4)
        'a000'
        >>> bits_to_hex('11', 2)
        'c0'
    """
    if bits.strip('01'):
        raise ValueError("Bit string may only contain '0' and '1'")

    remainder = len(bits) % 4
    if remainder:
        bits += '0' * (4 - remainder)

    hex_digits = ''.join(
        format(int(bits[i:i + 4], 2), 'x')
        for i in range(0, len(bits), 4)
    )

    return hex_digits.ljust(hex_length, '0')


def hex_to_binary(hex_value: str, bit_length: int = HASH_BITS) -> str:
    """
    Expand a hex string to its binary digits, left-padded to ``bit_length``.

    Leading zero nibbles are dropped by the integer conversion and restored
    by the left padding, so a full-width hash round-trips exactly.

    Examples:
        >>> hex_to_binary('0f', 8)
        '00001111'
    """
    if not isinstance(hex_value, str) or not HEX_RE.match(hex_value):
        raise InvalidHashError(f"Not a hex string: {hex_value!r}")

    return format(int(hex_value, 16), 'b').zfill(bit_length)


def matrix_bits(mask) -> str:
    """Flatten a boolean array row-major into a '0'/'1' string."""
    return ''.join('1' if bit else '0' for bit in mask.ravel())


__all__ = [
    'HEX_RE',
    'fit_bits',
    'bits_to_hex',
    'hex_to_binary',
    'matrix_bits',
]
