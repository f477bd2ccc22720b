"""
Database connection management.

Provides ConnectionManager, which owns the single SQLite connection a
cache store uses and wraps writes in explicit transactions.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from ..exceptions import ContextCorruptedError, StoreError


class ConnectionManager:
    """
    Owns one SQLite connection for the lifetime of a cache store.

    Provides:
    - WAL mode for readers in other processes
    - Transaction management (BEGIN/COMMIT/ROLLBACK)

    The connection is not locked here. Callers serialize access through
    the shared context lock, which is why it is opened with
    ``check_same_thread=False``.
    """

    def __init__(self, db_path: str):
        """
        Open the connection.

        Args:
            db_path: Path to SQLite database file (':memory:' allowed)

        Raises:
            StoreError: If the database cannot be opened
        """
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        conn = None
        try:
            self._ensure_directory()
            conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                # Autocommit; transactions are issued explicitly
                isolation_level=None,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            raise StoreError(f"Error connecting to or creating database at {db_path}: {e}") from e
        self._conn = conn

    def _ensure_directory(self):
        """Ensure the directory for the database file exists."""
        if self.db_path == ':memory:':
            return
        db_dir = Path(self.db_path).resolve().parent
        db_dir.mkdir(parents=True, exist_ok=True)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Database connection is closed")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for a write transaction.

        Everything executed inside the block commits together or not at
        all. ``BEGIN IMMEDIATE`` takes the write lock up front so another
        process cannot slip a write between our read and our update.

        Example:
            with conn_mgr.transaction() as conn:
                conn.execute("UPDATE ...")
        """
        conn = self.conn
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.execute("COMMIT")
        except BaseException:
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as e:
                raise ContextCorruptedError(
                    f"Rollback failed, connection state unknown: {e}"
                ) from e
            raise

    def close(self):
        """Close the connection. Safe to call more than once."""
        conn, self._conn = self._conn, None
        if conn is not None:
            conn.close()


__all__ = ['ConnectionManager']
