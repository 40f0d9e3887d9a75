"""
Formatting utilities for boardhash.

Provides human-readable formatting for counts, timestamps and file sizes.
"""

from __future__ import annotations

import time
from typing import Optional

# Re-export format_size from models for convenience
from ..models import format_size


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_timestamp(timestamp: Optional[float]) -> str:
    """
    Format a Unix timestamp as local 'YYYY-MM-DD HH:MM:SS'.

    Examples:
        >>> format_timestamp(None)
        'never'
    """
    if timestamp is None:
        return "never"
    return time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(timestamp))


def pluralize(count: int, word: str) -> str:
    """
    Return '<count> <word>' with an 's' appended unless count is 1.

    Examples:
        >>> pluralize(1, 'image')
        '1 image'
        >>> pluralize(4, 'image')
        '4 images'
    """
    return f"{count} {word}" + ('' if count == 1 else 's')


__all__ = ['format_number', 'format_timestamp', 'format_size', 'pluralize']
