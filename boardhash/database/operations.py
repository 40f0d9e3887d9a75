"""
Core read/write operations for the hash store.

Provides StoreOperations for image rows and their perceptual hash records.
Reads return None/empty on missing rows; writes propagate sqlite3 errors
so a failed transaction is never reported as done.
"""

from __future__ import annotations

import sqlite3
import time
import logging
from typing import Optional

from ..models import ImageRecord, ImageHashRecord
from .connection import ConnectionManager
from .schema import PHASH_BLOCK_COLUMNS
from .utils import (
    HASH_COLUMNS,
    IMAGE_COLUMNS,
    row_to_image,
    row_to_hash_record,
    hash_record_params,
    image_params,
)


logger = logging.getLogger(__name__)

_HASH_PLACEHOLDERS = ', '.join('?' * len(HASH_COLUMNS))
_UPSERT_HASH_SQL = f"""
    INSERT INTO image_hashes ({', '.join(HASH_COLUMNS)})
    VALUES ({_HASH_PLACEHOLDERS})
    ON CONFLICT(image_id) DO UPDATE SET
        {', '.join(f'{col} = excluded.{col}' for col in HASH_COLUMNS[1:])}
"""
_INSERT_IMAGE_SQL = f"""
    INSERT INTO images ({', '.join(IMAGE_COLUMNS)})
    VALUES ({', '.join('?' * len(IMAGE_COLUMNS))})
"""


def _check_record(record: ImageHashRecord) -> None:
    problems = record.validate()
    if problems:
        raise ValueError(f"Refusing to store hash record for {record.image_id}: {'; '.join(problems)}")


class StoreOperations:
    """
    Handles reads and writes for images and image hash records.

    Every write touching a hash record stores all of its fields in one
    transaction.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize store operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    # Reads

    def get_image(self, image_id: str, status: Optional[str] = None) -> Optional[ImageRecord]:
        """
        Get an image row by its public id.

        Args:
            image_id: Image identifier
            status: Only match images with this status, if given

        Returns:
            ImageRecord if found, None otherwise
        """
        sql = "SELECT * FROM images WHERE image_id = ?"
        params: list = [image_id]
        if status is not None:
            sql += " AND status = ?"
            params.append(status)

        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                row = conn.execute(sql + " LIMIT 1", params).fetchone()
            return row_to_image(row) if row else None
        except sqlite3.Error as e:
            logger.warning(f"Failed to read image {image_id}: {e}")
            return None

    def get_hash_record(self, image_id: str) -> Optional[ImageHashRecord]:
        """
        Get the hash record of an image.

        Returns:
            ImageHashRecord if found, None otherwise
        """
        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                row = conn.execute(
                    "SELECT * FROM image_hashes WHERE image_id = ? LIMIT 1",
                    (image_id,)
                ).fetchone()
            return row_to_hash_record(row) if row else None
        except sqlite3.Error as e:
            logger.warning(f"Failed to read hash record for {image_id}: {e}")
            return None

    def list_image_ids(self, status: Optional[str] = 'approved') -> list[str]:
        """
        List image ids, newest first.

        Args:
            status: Only list images with this status (None for all)
        """
        sql = "SELECT image_id FROM images"
        params: tuple = ()
        if status is not None:
            sql += " WHERE status = ?"
            params = (status,)

        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                rows = conn.execute(sql + " ORDER BY id DESC", params).fetchall()
            return [row['image_id'] for row in rows]
        except sqlite3.Error as e:
            logger.warning(f"Failed to list images: {e}")
            return []

    def select_rehash_batch(self, limit: int) -> list[ImageRecord]:
        """
        Select approved images that have not been rehashed yet, oldest first.

        Args:
            limit: Maximum number of images to return
        """
        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                rows = conn.execute("""
                    SELECT * FROM images
                    WHERE (rehashed = 0 OR rehashed_on IS NULL)
                      AND status = 'approved'
                    ORDER BY id ASC
                    LIMIT ?
                """, (limit,)).fetchall()
            return [row_to_image(row) for row in rows]
        except sqlite3.Error as e:
            logger.warning(f"Failed to select rehash batch: {e}")
            return []

    def find_block_matches(self, record: ImageHashRecord, limit: int) -> list[ImageHashRecord]:
        """
        Find other hash records sharing at least one pHash block position.

        Args:
            record: Record to match against (excluded from the results)
            limit: Maximum number of records to return
        """
        condition = ' OR '.join(f"{col} = ?" for col in PHASH_BLOCK_COLUMNS)
        params = list(record.phash_blocks) + [record.image_id, limit]

        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                rows = conn.execute(f"""
                    SELECT * FROM image_hashes
                    WHERE ({condition}) AND image_id != ?
                    LIMIT ?
                """, params).fetchall()
            return [row_to_hash_record(row) for row in rows]
        except sqlite3.Error as e:
            logger.warning(f"Failed to query block matches for {record.image_id}: {e}")
            return []

    # Writes

    def add_image(self, image: ImageRecord, record: ImageHashRecord) -> ImageRecord:
        """
        Insert an image row and its hash record together.

        Args:
            image: Image row to insert (id and created_at are assigned)
            record: Hash record for the same image id

        Returns:
            The image with its database id filled in

        Raises:
            ValueError: If the record is inconsistent or belongs to another image
            sqlite3.IntegrityError: If the image id already exists
        """
        if record.image_id != image.image_id:
            raise ValueError(f"Hash record {record.image_id} does not belong to {image.image_id}")
        _check_record(record)

        with self.conn_mgr.connection(exclusive=True) as conn:
            cursor = conn.execute(_INSERT_IMAGE_SQL, image_params(image))
            conn.execute(_UPSERT_HASH_SQL, hash_record_params(record))
            image.id = cursor.lastrowid
            row = conn.execute(
                "SELECT created_at FROM images WHERE id = ?", (image.id,)
            ).fetchone()
            image.created_at = row['created_at']

        return image

    def upsert_hash_record(self, record: ImageHashRecord) -> None:
        """
        Insert or overwrite every field of a hash record.

        Raises:
            ValueError: If the record is inconsistent
            sqlite3.IntegrityError: If the image does not exist
        """
        _check_record(record)
        with self.conn_mgr.connection(exclusive=True) as conn:
            conn.execute(_UPSERT_HASH_SQL, hash_record_params(record))

    def save_rehash(self, record: ImageHashRecord) -> float:
        """
        Upsert a recomputed hash record and mark its image as rehashed.

        Both statements run in one transaction.

        Returns:
            The rehash timestamp written to the image row
        """
        _check_record(record)
        rehashed_on = time.time()

        with self.conn_mgr.connection(exclusive=True) as conn:
            conn.execute(_UPSERT_HASH_SQL, hash_record_params(record))
            conn.execute("""
                UPDATE images SET rehashed = 1, rehashed_on = ?
                WHERE image_id = ?
            """, (rehashed_on, record.image_id))

        return rehashed_on

    def set_status(self, image_id: str, status: str) -> bool:
        """
        Change the moderation status of an image.

        Returns:
            True if an image was updated
        """
        with self.conn_mgr.connection(exclusive=True) as conn:
            result = conn.execute(
                "UPDATE images SET status = ? WHERE image_id = ?",
                (status, image_id)
            )
            return result.rowcount > 0

    def delete_image(self, image_id: str) -> bool:
        """
        Delete an image; its hash record is removed by the cascade.

        Returns:
            True if an image was deleted
        """
        with self.conn_mgr.connection(exclusive=True) as conn:
            result = conn.execute("DELETE FROM images WHERE image_id = ?", (image_id,))
            return result.rowcount > 0


__all__ = ['StoreOperations']
