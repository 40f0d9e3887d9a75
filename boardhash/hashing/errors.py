"""
Exception types raised by the hashing engine.
"""

from __future__ import annotations


class HashingError(Exception):
    """Base class for hashing engine failures."""


class ImageDecodeError(HashingError):
    """Raised when bytes do not decode as a supported raster image."""


class InvalidHashError(HashingError, ValueError):
    """Raised when a hex hash string is malformed or has the wrong length."""


__all__ = ['HashingError', 'ImageDecodeError', 'InvalidHashError']
