"""
Maintenance operations for the hash store.

Provides statistics, clearing and vacuum operations.
"""

from __future__ import annotations

import os
import sqlite3
import logging

from .connection import ConnectionManager


logger = logging.getLogger(__name__)


class MaintenanceOperations:
    """
    Handles maintenance operations for the hash store.

    Provides statistics reporting and database compaction.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize maintenance operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def get_stats(self) -> dict:
        """
        Get store statistics.

        Returns:
            Dictionary with store statistics:
                - total_images: Number of image rows
                - approved_images: Number of approved images
                - hashed_images: Number of hash records
                - pending_rehash: Approved images not yet rehashed
                - last_rehash: Timestamp of the latest rehash (None if never)
                - db_size_bytes: Database size in bytes
                - db_path: Path to database file
        """
        db_path = self.conn_mgr.db_path
        stats = {
            'total_images': 0,
            'approved_images': 0,
            'hashed_images': 0,
            'pending_rehash': 0,
            'last_rehash': None,
            'db_size_bytes': os.path.getsize(db_path) if os.path.exists(db_path) else 0,
            'db_path': db_path,
        }

        try:
            with self.conn_mgr.connection(exclusive=False) as conn:
                stats['total_images'] = conn.execute(
                    "SELECT COUNT(*) AS cnt FROM images"
                ).fetchone()['cnt']
                stats['approved_images'] = conn.execute(
                    "SELECT COUNT(*) AS cnt FROM images WHERE status = 'approved'"
                ).fetchone()['cnt']
                stats['hashed_images'] = conn.execute(
                    "SELECT COUNT(*) AS cnt FROM image_hashes"
                ).fetchone()['cnt']
                stats['pending_rehash'] = conn.execute("""
                    SELECT COUNT(*) AS cnt FROM images
                    WHERE (rehashed = 0 OR rehashed_on IS NULL) AND status = 'approved'
                """).fetchone()['cnt']
                stats['last_rehash'] = conn.execute(
                    "SELECT MAX(rehashed_on) AS last FROM images"
                ).fetchone()['last']
        except sqlite3.Error as e:
            logger.warning(f"Failed to get store stats: {e}")

        return stats

    def clear(self):
        """Delete every image and hash record."""
        with self.conn_mgr.connection(exclusive=True) as conn:
            conn.execute("DELETE FROM image_hashes")
            conn.execute("DELETE FROM images")
        # VACUUM outside transaction
        self.vacuum()

    def vacuum(self):
        """Compact the database file."""
        try:
            # VACUUM must run outside a transaction
            conn = sqlite3.connect(self.conn_mgr.db_path, timeout=30.0)
            conn.execute("VACUUM")
            conn.close()
        except sqlite3.Error as e:
            logger.debug(f"Failed to vacuum database: {e}")


__all__ = ['MaintenanceOperations']
