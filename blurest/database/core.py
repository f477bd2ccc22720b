"""
BlurhashCache facade class for coordinating database operations.

Provides a unified interface to the cache table using the facade pattern.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Mapping, Optional

from ..config import CACHE_DB_FILE
from ..exceptions import StoreError
from ..models import CacheEntry
from .connection import ConnectionManager
from .schema import initialize_schema
from .operations import CacheOperations
from .maintenance import MaintenanceOperations


logger = logging.getLogger(__name__)


class BlurhashCache:
    """
    SQLite-backed store of blurhash cache entries.

    Holds one open connection until close() is called. Not locked
    internally: the shared context serializes access.

    Usage:
        cache = BlurhashCache("/srv/site/.blurhash.db")
        entry = cache.lookup("img/hero.jpg")
        if entry is None:
            cache.insert(new_entry)
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Open the store and create the schema if needed.

        Args:
            db_path: Path to SQLite database file. Uses default if None.

        Raises:
            StoreError: If the database cannot be opened or initialized
        """
        self.db_path = db_path or CACHE_DB_FILE

        self._conn_mgr = ConnectionManager(self.db_path)
        self._operations = CacheOperations(self._conn_mgr)
        self._maintenance = MaintenanceOperations(self._conn_mgr)

        try:
            with self._conn_mgr.transaction() as conn:
                initialize_schema(conn)
        except sqlite3.Error as e:
            self._conn_mgr.close()
            raise StoreError(f"Failed to initialize database at {self.db_path}: {e}") from e
        logger.debug(f"Opened blurhash cache at {self.db_path}")

    # Delegate to CacheOperations
    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Get the entry for a root-relative key, if any."""
        return self._operations.lookup(key)

    def insert(self, entry: CacheEntry) -> int:
        """Insert a new entry; fails if the key exists."""
        return self._operations.insert(entry)

    def update(self, key: str, fields: Mapping[str, Any]):
        """Update fields of an existing entry atomically."""
        self._operations.update(key, fields)

    # Delegate to MaintenanceOperations
    def get_stats(self) -> dict:
        """Get cache statistics."""
        return self._maintenance.get_stats()

    @property
    def closed(self) -> bool:
        return self._conn_mgr.closed

    def close(self):
        """Release the database connection."""
        self._conn_mgr.close()
        logger.debug(f"Closed blurhash cache at {self.db_path}")

    def __enter__(self) -> 'BlurhashCache':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


__all__ = ['BlurhashCache']
