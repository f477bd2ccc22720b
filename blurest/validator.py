"""
Two-tier cache validation for blurhash fingerprints.

A stored fingerprint is reused when either:
1. The file's mtime (milliseconds) equals the stored mtime - no bytes read
2. The mtime differs but the XXH3 hash of the bytes equals the stored hash -
   only the stored mtime is refreshed

Otherwise the image is decoded and re-encoded and the row is rewritten
(or inserted, for a file seen for the first time).
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Optional

from .database import BlurhashCache
from .exceptions import FileAccessError
from .fingerprint import ImageFingerprinter
from .models import CacheEntry, CacheOutcome, FingerprintResult, ValidationStats


logger = logging.getLogger(__name__)


def get_mtime_ms(path: Path) -> int:
    """
    Get a file's modification time in whole milliseconds since the epoch.

    Raises:
        FileAccessError: If metadata is unreadable or the path is not a file
    """
    try:
        st = os.stat(path)
    except OSError as e:
        raise FileAccessError(f"Failed to read metadata for {path}: {e}") from e
    if not stat.S_ISREG(st.st_mode):
        raise FileAccessError(f"Not a regular file: {path}")
    return st.st_mtime_ns // 1_000_000


def read_file_bytes(path: Path) -> bytes:
    """
    Read a file's full contents.

    Raises:
        FileAccessError: If the file vanished or cannot be read
    """
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(f"Failed to read {path}: {e}") from e


class CacheValidator:
    """
    Decides hit / refresh / recompute / miss for one cache key per call.

    Not thread-safe on its own; the shared context runs each pass under
    its lock so the read-modify-write below cannot interleave.

    Usage:
        validator = CacheValidator(store)
        result = validator.validate_or_compute("img/a.png", Path("/proj/img/a.png"))
    """

    def __init__(self, store: BlurhashCache, fingerprinter: Optional[ImageFingerprinter] = None):
        self.store = store
        self.fingerprinter = fingerprinter or ImageFingerprinter()
        self.stats = ValidationStats()
        self.last_outcome: Optional[CacheOutcome] = None

    def validate_or_compute(self, key: str, absolute_path: Path) -> FingerprintResult:
        """
        Return the fingerprint for a file, reusing the cache when valid.

        Args:
            key: Root-relative cache key
            absolute_path: Canonical path of the file

        Returns:
            FingerprintResult with blurhash, width and height

        Raises:
            FileAccessError: Metadata or bytes unreadable
            DecodeError: Bytes are not a supported image (store untouched)
            StoreError: Lookup/insert/update failed (store untouched)
        """
        current_mtime_ms = get_mtime_ms(absolute_path)
        entry = self.store.lookup(key)

        if entry is None:
            result = self._insert_new(key, absolute_path, current_mtime_ms)
            self._record(CacheOutcome.MISS)
            return result

        if entry.modified_at_ms == current_mtime_ms:
            logger.debug(f"Cache hit: mtime match for {key}")
            self._record(CacheOutcome.HIT)
            return entry.result

        data = read_file_bytes(absolute_path)
        current_hash = self.fingerprinter.content_hash(data)

        if current_hash == entry.content_hash:
            logger.debug(f"Cache hit: content unchanged, updating mtime for {key}")
            self.store.update(key, {'modified_at_ms': current_mtime_ms})
            self._record(CacheOutcome.REFRESHED)
            return entry.result

        logger.warning(f"Cache stale: content changed for {key}")
        result = self.fingerprinter.fingerprint(data)
        self.store.update(key, {
            'content_hash': current_hash,
            'modified_at_ms': current_mtime_ms,
            'blurhash': result.blurhash,
            'width': result.width,
            'height': result.height,
        })
        self._record(CacheOutcome.RECOMPUTED)
        return result

    def _insert_new(self, key: str, absolute_path: Path, mtime_ms: int) -> FingerprintResult:
        logger.info(f"Cache miss: new file {key}")
        data = read_file_bytes(absolute_path)
        content_hash = self.fingerprinter.content_hash(data)
        result = self.fingerprinter.fingerprint(data)
        self.store.insert(CacheEntry(
            key=key,
            content_hash=content_hash,
            modified_at_ms=mtime_ms,
            blurhash=result.blurhash,
            width=result.width,
            height=result.height,
        ))
        return result

    def _record(self, outcome: CacheOutcome):
        self.last_outcome = outcome
        self.stats.record(outcome)


__all__ = ['CacheValidator', 'get_mtime_ms', 'read_file_bytes']
