"""
Core CRUD operations for the blurhash cache.

Provides CacheOperations: lookup by key, insert and update-by-key. Every
sqlite3 failure is reported as StoreError, and every write is a single
statement inside its own transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Mapping, Optional

from ..exceptions import StoreError
from ..models import CacheEntry
from .connection import ConnectionManager


logger = logging.getLogger(__name__)

# CacheEntry field -> blurhash_cache column for updatable fields
UPDATABLE_COLUMNS = {
    'content_hash': 'xxhash',
    'modified_at_ms': 'mtime_ms',
    'blurhash': 'blurhash',
    'width': 'width',
    'height': 'height',
}


class CacheOperations:
    """
    Handles lookup, insert and update for the blurhash cache.

    Rows are never deleted here; the key of a row never changes.
    """

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize cache operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """
        Get the cache row for a key.

        Args:
            key: Root-relative path

        Returns:
            CacheEntry if present, None otherwise

        Raises:
            StoreError: If the query fails
        """
        try:
            row = self.conn_mgr.conn.execute("""
                SELECT * FROM blurhash_cache WHERE relative_path = ?
            """, (key,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to look up cache entry for {key}: {e}") from e

        return CacheEntry.from_row(row) if row else None

    def insert(self, entry: CacheEntry) -> int:
        """
        Insert a new cache row.

        Args:
            entry: Entry to store (id and timestamps are assigned by the store)

        Returns:
            Row id of the new entry

        Raises:
            StoreError: If the key already exists or the insert fails
        """
        try:
            with self.conn_mgr.transaction() as conn:
                cursor = conn.execute("""
                    INSERT INTO blurhash_cache (
                        relative_path, xxhash, mtime_ms, blurhash, width, height
                    ) VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    entry.key, entry.content_hash, entry.modified_at_ms,
                    entry.blurhash, entry.width, entry.height,
                ))
                return cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise StoreError(f"Cache entry already exists for {entry.key}: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Failed to insert cache entry for {entry.key}: {e}") from e

    def update(self, key: str, fields: Mapping[str, Any]):
        """
        Update fields of an existing row in one statement.

        Args:
            key: Root-relative path of the row
            fields: CacheEntry field names mapped to new values

        Raises:
            StoreError: If no row has this key, a field is not updatable,
                or the update fails. Nothing is written in any of these cases.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS.keys()
        if unknown or not fields:
            raise StoreError(f"Cannot update cache fields {sorted(unknown) or '(none)'}")

        names = list(fields)
        assignments = ', '.join(f"{UPDATABLE_COLUMNS[name]} = ?" for name in names)
        params = [fields[name] for name in names] + [key]

        try:
            with self.conn_mgr.transaction() as conn:
                cursor = conn.execute(
                    f"UPDATE blurhash_cache SET {assignments} WHERE relative_path = ?",
                    params,
                )
                if cursor.rowcount == 0:
                    raise StoreError(f"No cache entry to update for {key}")
        except sqlite3.Error as e:
            raise StoreError(f"Failed to update cache entry for {key}: {e}") from e


__all__ = ['CacheOperations', 'UPDATABLE_COLUMNS']
