"""
Database schema initialization.

Creates the blurhash_cache table and its updated_at trigger. The layout
matches databases written by earlier deployments of the cache, so an
existing file keeps working.
"""

from __future__ import annotations

import logging
import sqlite3


logger = logging.getLogger(__name__)

TABLE_NAME = 'blurhash_cache'

# Columns a usable table must have. Older databases without width/height
# are rebuilt rather than mixed with dimensioned rows.
REQUIRED_COLUMNS = frozenset({
    'id', 'relative_path', 'xxhash', 'mtime_ms', 'blurhash',
    'width', 'height', 'created_at', 'updated_at',
})

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS blurhash_cache (
        id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
        relative_path TEXT NOT NULL UNIQUE,
        xxhash TEXT NOT NULL,
        mtime_ms BIGINT NOT NULL,
        blurhash TEXT NOT NULL,
        width INTEGER NOT NULL,
        height INTEGER NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
"""

# The store refreshes updated_at itself; callers never set it
CREATE_TRIGGER_SQL = """
    CREATE TRIGGER IF NOT EXISTS trigger_blurhash_cache_updated_at
    AFTER UPDATE ON blurhash_cache
    FOR EACH ROW
    BEGIN
        UPDATE blurhash_cache SET updated_at = CURRENT_TIMESTAMP WHERE id = OLD.id;
    END
"""


def existing_columns(conn: sqlite3.Connection) -> set[str]:
    """Column names of blurhash_cache, or an empty set if it is missing."""
    rows = conn.execute(f"PRAGMA table_info({TABLE_NAME})").fetchall()
    return {row['name'] for row in rows}


def initialize_schema(conn: sqlite3.Connection) -> None:
    """
    Initialize the cache table and trigger.

    Creates them if they don't exist. Drops and recreates them if the
    existing table predates the width/height columns.

    Args:
        conn: Active database connection inside a transaction
    """
    columns = existing_columns(conn)
    if columns and not REQUIRED_COLUMNS.issubset(columns):
        missing = sorted(REQUIRED_COLUMNS - columns)
        logger.warning(
            f"Cache table is missing columns {missing}; rebuilding it"
        )
        conn.execute("DROP TRIGGER IF EXISTS trigger_blurhash_cache_updated_at")
        conn.execute(f"DROP TABLE {TABLE_NAME}")
        columns = set()

    if not columns:
        logger.info("Creating blurhash cache table")

    conn.execute(CREATE_TABLE_SQL)
    conn.execute(CREATE_TRIGGER_SQL)


__all__ = ['TABLE_NAME', 'REQUIRED_COLUMNS', 'existing_columns', 'initialize_schema']
