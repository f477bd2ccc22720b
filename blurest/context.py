"""
Shared context for the blurhash cache.

Holds the one live store connection and the canonical project root
behind a single lock. Every operation that touches the store holds that
lock from lookup through commit, so validation passes never interleave.

Lifecycle:
    Uninitialized --init()--> Ready --clear()--> Uninitialized

Calling init() while Ready replaces the context and closes the previous
store, but only once the new store has opened. A failed init() leaves
whatever was there before untouched.
"""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

from .database import BlurhashCache
from .exceptions import (
    BlurestError,
    ContextCorruptedError,
    InitError,
    NotInitializedError,
    StoreError,
)
from .fingerprint import ImageFingerprinter
from .models import FingerprintResult
from .paths import canonicalize_root, resolve_cache_key
from .validator import CacheValidator


logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class AppContext:
    """The state guarded by a SharedContext while it is Ready."""
    store: BlurhashCache
    project_root: Path
    validator: CacheValidator = field(repr=False)

    def get_blurhash(self, image_path: str | os.PathLike) -> FingerprintResult:
        """
        Resolve a path and return its (possibly cached) fingerprint.

        Raises:
            PathNotFoundError, OutsideRootError, InvalidEncodingError:
                Path resolution failed; the store is never consulted
            FileAccessError, DecodeError, StoreError: See CacheValidator
        """
        key, absolute_path = resolve_cache_key(self.project_root, image_path)
        return self.validator.validate_or_compute(key, absolute_path)


class SharedContext:
    """
    Thread-safe holder for the store connection and project root.

    If anything other than a BlurestError escapes while the lock is held,
    the connection may have been left mid-operation, so the context is
    marked corrupted. Every later acquire() raises ContextCorruptedError
    until clear() or init() replaces the state.
    """

    def __init__(self, fingerprinter_factory: Callable[[], ImageFingerprinter] = ImageFingerprinter):
        """
        Args:
            fingerprinter_factory: Builds the fingerprinter each new
                validator uses (tests pass counting subclasses)
        """
        self._lock = threading.Lock()
        self._app: Optional[AppContext] = None
        self._corrupted = False
        self._fingerprinter_factory = fingerprinter_factory

    def init(self, store_location: str, root: str | os.PathLike):
        """
        Open the store and set the project root.

        Args:
            store_location: Path to the SQLite database file
            root: Project root directory; cache keys are relative to it

        Raises:
            InitError: Root unresolvable or store unreachable
        """
        project_root = canonicalize_root(root)
        try:
            store = BlurhashCache(store_location)
        except StoreError as e:
            raise InitError(f"Failed to connect to database: {e}") from e

        app = AppContext(
            store=store,
            project_root=project_root,
            validator=CacheValidator(store, self._fingerprinter_factory()),
        )

        with self._lock:
            previous, self._app = self._app, app
            self._corrupted = False

        if previous is not None:
            logger.info("Replacing existing context; closing previous store")
            self._close_store(previous)
        logger.info(f"Blurhash cache ready (db={store_location}, root={project_root})")

    def clear(self):
        """Release the store and return to Uninitialized. Always succeeds."""
        with self._lock:
            previous, self._app = self._app, None
            self._corrupted = False
        if previous is not None:
            self._close_store(previous)
            logger.info("Blurhash cache context cleared")

    def is_initialized(self) -> bool:
        """True when Ready and not corrupted."""
        with self._lock:
            return self._app is not None and not self._corrupted

    @property
    def corrupted(self) -> bool:
        with self._lock:
            return self._corrupted

    @contextmanager
    def acquire(self) -> Iterator[AppContext]:
        """
        Hold the lock and yield the Ready state for one operation.

        Raises:
            ContextCorruptedError: A previous holder failed mid-operation
            NotInitializedError: init() has not been called or clear() ran
        """
        with self._lock:
            if self._corrupted:
                raise ContextCorruptedError(
                    "Context lock was poisoned by a failed operation; "
                    "call clear() or initialize again."
                )
            if self._app is None:
                raise NotInitializedError(
                    "Context not initialized. Call initialize first."
                )
            try:
                yield self._app
            except ContextCorruptedError:
                self._corrupted = True
                raise
            except (BlurestError, GeneratorExit):
                raise
            except BaseException as e:
                self._corrupted = True
                logger.error(f"Unexpected failure while holding context lock: {e!r}")
                raise ContextCorruptedError(
                    f"Operation failed mid-flight, context is no longer trusted: {e!r}"
                ) from e

    def with_context(self, fn: Callable[[AppContext], T]) -> T:
        """Run ``fn`` with the Ready state while holding the lock."""
        with self.acquire() as app:
            return fn(app)

    def get_blurhash(self, image_path: str | os.PathLike) -> FingerprintResult:
        """Convenience wrapper: one locked validation pass for ``image_path``."""
        return self.with_context(lambda app: app.get_blurhash(image_path))

    @staticmethod
    def _close_store(app: AppContext):
        try:
            app.store.close()
        except Exception as e:
            logger.warning(f"Error closing cache database {app.store.db_path}: {e}")


__all__ = ['AppContext', 'SharedContext']
