"""
HashStore facade class for coordinating database operations.

Provides a unified interface to all store operations using the facade pattern.
"""

from __future__ import annotations

from typing import Optional

from ..config import DATABASE_FILE
from ..models import ImageRecord, ImageHashRecord
from .connection import ConnectionManager
from .schema import initialize_schema, SCHEMA_VERSION
from .operations import StoreOperations
from .maintenance import MaintenanceOperations


class HashStore:
    """
    SQLite-backed store for images and their perceptual hash records.

    Usage:
        store = HashStore("/var/lib/board/boardhash.db")

        record = store.get_hash_record(image_id)
        if record is None:
            ...
    """

    SCHEMA_VERSION = SCHEMA_VERSION

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file. Uses default if None.
        """
        self.db_path = db_path or DATABASE_FILE

        self._conn_mgr = ConnectionManager(self.db_path)
        self._operations = StoreOperations(self._conn_mgr)
        self._maintenance = MaintenanceOperations(self._conn_mgr)

        with self._conn_mgr.connection(exclusive=True) as conn:
            initialize_schema(conn)

    # Delegate to StoreOperations
    def get_image(self, image_id: str, status: Optional[str] = None) -> Optional[ImageRecord]:
        """Get an image row, optionally restricted to a status."""
        return self._operations.get_image(image_id, status)

    def get_hash_record(self, image_id: str) -> Optional[ImageHashRecord]:
        """Get the hash record of an image."""
        return self._operations.get_hash_record(image_id)

    def list_image_ids(self, status: Optional[str] = 'approved') -> list[str]:
        """List image ids, newest first."""
        return self._operations.list_image_ids(status)

    def select_rehash_batch(self, limit: int) -> list[ImageRecord]:
        """Select approved, not yet rehashed images, oldest first."""
        return self._operations.select_rehash_batch(limit)

    def find_block_matches(self, record: ImageHashRecord, limit: int) -> list[ImageHashRecord]:
        """Find records sharing at least one pHash block position."""
        return self._operations.find_block_matches(record, limit)

    def add_image(self, image: ImageRecord, record: ImageHashRecord) -> ImageRecord:
        """Insert an image and its hash record in one transaction."""
        return self._operations.add_image(image, record)

    def upsert_hash_record(self, record: ImageHashRecord) -> None:
        """Insert or overwrite a hash record."""
        self._operations.upsert_hash_record(record)

    def save_rehash(self, record: ImageHashRecord) -> float:
        """Upsert a recomputed record and mark the image rehashed."""
        return self._operations.save_rehash(record)

    def set_status(self, image_id: str, status: str) -> bool:
        """Change the moderation status of an image."""
        return self._operations.set_status(image_id, status)

    def delete_image(self, image_id: str) -> bool:
        """Delete an image and, by cascade, its hash record."""
        return self._operations.delete_image(image_id)

    # Delegate to MaintenanceOperations
    def get_stats(self) -> dict:
        """Get store statistics."""
        return self._maintenance.get_stats()

    def clear(self):
        """Delete all stored data."""
        self._maintenance.clear()

    def vacuum(self):
        """Compact the database file."""
        self._maintenance.vacuum()


__all__ = ['HashStore']
