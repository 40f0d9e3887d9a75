"""
Database connection management with thread safety.

Provides ConnectionManager for SQLite access where every logical update
runs inside a single transaction.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator


class ConnectionManager:
    """
    Manages SQLite connections for the hash store.

    Provides a context manager for database connections with:
    - A write lock serialising writers within the process
    - WAL journaling and enforced foreign keys (hash rows cascade with images)
    - Transaction management (BEGIN/COMMIT/ROLLBACK)
    """

    def __init__(self, db_path: str):
        """
        Initialize connection manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._write_lock = threading.Lock()
        self._ensure_directory()

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        db_path = Path(self.db_path).resolve()
        db_dir = db_path.parent

        if db_dir and db_dir != db_path:
            db_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def connection(self, exclusive: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for a transactional connection.

        Args:
            exclusive: If True, hold the write lock for the whole transaction

        Yields:
            sqlite3.Connection with row factory set; committed on success,
            rolled back if the block raises

        Example:
            with conn_mgr.connection(exclusive=True) as conn:
                conn.execute("UPDATE images SET ...")
        """
        if exclusive:
            self._write_lock.acquire()

        try:
            conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row

            conn.execute("PRAGMA journal_mode=WAL")
            # Must be set outside a transaction
            conn.execute("PRAGMA foreign_keys=ON")

            conn.execute("BEGIN IMMEDIATE" if exclusive else "BEGIN")

            try:
                yield conn
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise
            finally:
                conn.close()
        finally:
            if exclusive:
                self._write_lock.release()


__all__ = ['ConnectionManager']
