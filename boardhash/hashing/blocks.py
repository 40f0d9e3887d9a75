"""
pHash block decomposition.

The pHash is persisted both whole and as 16 fixed-position slices of 4 hex
characters so each 16-bit slice can be indexed and queried on its own.
The slices are a pure decomposition of the hash, not a separate hash.
"""

from __future__ import annotations

from ..config import PHASH_BLOCK_COUNT
from .errors import InvalidHashError


def split_phash(phash: str, count: int = PHASH_BLOCK_COUNT) -> list[str]:
    """
    Slice a pHash into ``count`` equal blocks.

    Block ``i`` is ``phash[i * w : i * w + w]`` where ``w = len(phash) // count``.

    Raises:
        InvalidHashError: If the hash length is not a multiple of ``count``

    Examples:
        >>> split_phash('0123456789abcdef', 4)
        ['0123', '4567', '89ab', 'cdef']
    """
    if not phash or len(phash) % count:
        raise InvalidHashError(
            f"pHash of length {len(phash)} cannot be split into {count} blocks"
        )

    width = len(phash) // count
    return [phash[i * width:(i + 1) * width] for i in range(count)]


def join_blocks(blocks: list[str]) -> str:
    """Concatenate blocks back into the original pHash."""
    return ''.join(blocks)


__all__ = ['split_phash', 'join_blocks']
