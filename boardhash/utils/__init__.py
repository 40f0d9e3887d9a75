"""
Utilities package for boardhash.

Provides:
- formatters: Human-readable formatting for numbers, timestamps and sizes
- validators: Input validation and path security checks
"""

from __future__ import annotations

from . import formatters
from . import validators

from .formatters import format_number, format_timestamp, format_size, pluralize
from .validators import (
    validate_path_in_directory,
    resolve_original_path,
    validate_image_id,
    validate_batch_size,
    validate_directory,
)

__all__ = [
    # Submodules
    'formatters',
    'validators',
    # Formatters
    'format_number',
    'format_timestamp',
    'format_size',
    'pluralize',
    # Validators
    'validate_path_in_directory',
    'resolve_original_path',
    'validate_image_id',
    'validate_batch_size',
    'validate_directory',
]
