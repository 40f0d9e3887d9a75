"""
Shared utilities for database operations.

Provides row conversion helpers used by the store operations.
"""

from __future__ import annotations

import sqlite3

from ..models import ImageRecord, ImageHashRecord
from .schema import PHASH_BLOCK_COLUMNS

HASH_COLUMNS = ('image_id', 'ahash', 'dhash', 'phash') + PHASH_BLOCK_COLUMNS

IMAGE_COLUMNS = (
    'image_id', 'original_path', 'status', 'mime_type',
    'width', 'height', 'size_bytes',
    'md5', 'sha1', 'sha256', 'sha512',
)


def row_to_image(row: sqlite3.Row) -> ImageRecord:
    """
    Convert database row to ImageRecord object.

    Args:
        row: sqlite3.Row from the images table

    Returns:
        ImageRecord object
    """
    return ImageRecord(
        id=row['id'],
        image_id=row['image_id'],
        original_path=row['original_path'],
        status=row['status'],
        mime_type=row['mime_type'] or "",
        width=row['width'] or 0,
        height=row['height'] or 0,
        size_bytes=row['size_bytes'] or 0,
        md5=row['md5'] or "",
        sha1=row['sha1'] or "",
        sha256=row['sha256'] or "",
        sha512=row['sha512'] or "",
        rehashed=bool(row['rehashed']),
        rehashed_on=row['rehashed_on'],
        created_at=row['created_at'],
    )


def row_to_hash_record(row: sqlite3.Row) -> ImageHashRecord:
    """Convert an image_hashes row to ImageHashRecord."""
    return ImageHashRecord.from_dict(dict(row))


def hash_record_params(record: ImageHashRecord) -> tuple:
    """Column values for an image_hashes insert, in HASH_COLUMNS order."""
    return (record.image_id, record.ahash, record.dhash, record.phash) + tuple(record.phash_blocks)


def image_params(image: ImageRecord) -> tuple:
    """Column values for an images insert, in IMAGE_COLUMNS order."""
    return (
        image.image_id, image.original_path, image.status, image.mime_type,
        image.width, image.height, image.size_bytes,
        image.md5, image.sha1, image.sha256, image.sha512,
    )


__all__ = [
    'HASH_COLUMNS',
    'IMAGE_COLUMNS',
    'row_to_image',
    'row_to_hash_record',
    'hash_record_params',
    'image_params',
]
