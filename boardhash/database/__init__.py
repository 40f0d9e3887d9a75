"""
SQLite persistence for boardhash.

Stores image rows and their perceptual hash records:
- One hash record per image, cascade-deleted with it
- All hash fields written together in one transaction
- Indexed pHash block columns for candidate lookup

Public API:
- HashStore: Main store class
- get_store(): Get global store instance
- reset_store(): Reset global instance (testing)
"""

from __future__ import annotations

import threading
from typing import Optional

from .core import HashStore


# Global store instance (singleton pattern)
_store_instance: Optional[HashStore] = None
_store_lock = threading.Lock()


def get_store(db_path: Optional[str] = None) -> HashStore:
    """
    Get or create the global store instance (thread-safe).

    Args:
        db_path: Database path used when the instance is first created

    Returns:
        Singleton HashStore instance
    """
    global _store_instance
    if _store_instance is None:
        with _store_lock:
            # Double-check after acquiring lock
            if _store_instance is None:
                _store_instance = HashStore(db_path)
    return _store_instance


def reset_store():
    """
    Reset the global store instance (mainly for testing).
    """
    global _store_instance
    with _store_lock:
        _store_instance = None


__all__ = [
    'HashStore',
    'get_store',
    'reset_store',
]
