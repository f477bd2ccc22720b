"""
SQLite database backend for the blurhash cache.

Persists one row per tracked image, keyed by its root-relative path,
with the content hash and mtime used to decide whether the stored
blurhash is still valid.

Public API:
- BlurhashCache: Store facade (lookup/insert/update/get_stats/close)
- ConnectionManager: Single-connection transaction helper
- initialize_schema: Table and trigger creation
"""

from __future__ import annotations

from .core import BlurhashCache
from .connection import ConnectionManager
from .schema import initialize_schema, TABLE_NAME


__all__ = [
    'BlurhashCache',
    'ConnectionManager',
    'initialize_schema',
    'TABLE_NAME',
]
