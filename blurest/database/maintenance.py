"""
Maintenance operations for the blurhash cache.

Provides statistics reporting.
"""

from __future__ import annotations

import os
import sqlite3
import logging

from ..exceptions import StoreError
from .connection import ConnectionManager


logger = logging.getLogger(__name__)


class MaintenanceOperations:
    """Reports on the contents of the cache database."""

    def __init__(self, connection_manager: ConnectionManager):
        """
        Initialize maintenance operations.

        Args:
            connection_manager: ConnectionManager instance for database access
        """
        self.conn_mgr = connection_manager

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with total_entries, total_pixels, last_updated,
            db_size_mb and db_path
        """
        try:
            row = self.conn_mgr.conn.execute("""
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(width * height), 0) AS pixels,
                       MAX(updated_at) AS last_updated
                FROM blurhash_cache
            """).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read cache statistics: {e}") from e

        db_path = self.conn_mgr.db_path
        db_size = 0
        if db_path != ':memory:' and os.path.exists(db_path):
            db_size = os.path.getsize(db_path)

        return {
            'total_entries': row['total'],
            'total_pixels': row['pixels'],
            'last_updated': row['last_updated'],
            'db_size_mb': round(db_size / (1024 * 1024), 2),
            'db_path': db_path,
        }


__all__ = ['MaintenanceOperations']
