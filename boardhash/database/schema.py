"""
Database schema initialization.

Provides schema versioning and table creation for the hash store.
"""

from __future__ import annotations

import sqlite3

from ..config import PHASH_BLOCK_COUNT, IMAGE_STATUSES


# Schema version - increment when changing table structure
SCHEMA_VERSION = 1

PHASH_BLOCK_COLUMNS = tuple(f"phash_block_{i}" for i in range(PHASH_BLOCK_COUNT))


def initialize_schema(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema with versioning support.

    Creates tables and indexes if they don't exist.

    Args:
        conn: Active database connection

    Tables created:
        - meta: Schema version tracking
        - images: Stored originals and their moderation/rehash state
        - image_hashes: One perceptual hash record per image
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS meta (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    """)

    result = conn.execute(
        "SELECT value FROM meta WHERE key = 'schema_version'"
    ).fetchone()

    current_version = int(result['value']) if result else 0
    if current_version > SCHEMA_VERSION:
        raise RuntimeError(
            f"Database schema version {current_version} is newer than supported "
            f"version {SCHEMA_VERSION}"
        )

    statuses = ', '.join(f"'{s}'" for s in IMAGE_STATUSES)
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS images (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            image_id TEXT UNIQUE NOT NULL,
            original_path TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ({statuses})),
            mime_type TEXT NOT NULL DEFAULT '',
            width INTEGER,
            height INTEGER,
            size_bytes INTEGER DEFAULT 0,

            -- Digests of the original file
            md5 TEXT,
            sha1 TEXT,
            sha256 TEXT,
            sha512 TEXT,

            -- Rehash bookkeeping
            rehashed INTEGER NOT NULL DEFAULT 0,
            rehashed_on REAL,

            created_at REAL DEFAULT (strftime('%s', 'now'))
        )
    """)

    block_columns = ',\n'.join(f"            {col} TEXT" for col in PHASH_BLOCK_COLUMNS)
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS image_hashes (
            image_id TEXT PRIMARY KEY
                REFERENCES images(image_id) ON DELETE CASCADE,
            ahash TEXT NOT NULL,
            dhash TEXT NOT NULL,
            phash TEXT NOT NULL,
{block_columns}
        )
    """)

    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_images_rehash
        ON images(status, rehashed, id)
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_images_sha256
        ON images(sha256)
    """)
    # One index per block for the candidate pre-filter
    for col in PHASH_BLOCK_COLUMNS:
        conn.execute(f"""
            CREATE INDEX IF NOT EXISTS idx_image_hashes_{col}
            ON image_hashes({col})
        """)

    conn.execute("""
        INSERT OR REPLACE INTO meta (key, value)
        VALUES ('schema_version', ?)
    """, (str(SCHEMA_VERSION),))


__all__ = ['SCHEMA_VERSION', 'PHASH_BLOCK_COLUMNS', 'initialize_schema']
