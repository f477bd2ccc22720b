"""
Data models for the blurhash cache.

Contains dataclasses for cache rows, fingerprint results and the
per-validator counters.
"""

from __future__ import annotations

import enum
import sqlite3
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FingerprintResult:
    """
    Blurhash placeholder plus the pixel dimensions it was computed from.

    Attributes:
        blurhash: Encoded placeholder string
        width: Original image width in pixels
        height: Original image height in pixels
    """
    blurhash: str
    width: int
    height: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'blurhash': self.blurhash,
            'width': self.width,
            'height': self.height,
        }


@dataclass
class CacheEntry:
    """
    One row of the blurhash_cache table.

    Attributes:
        key: Root-relative path with '/' separators (unique)
        content_hash: Hex XXH3-64 of the file bytes at last computation
        modified_at_ms: File mtime in milliseconds at last computation
        blurhash: Cached placeholder string
        width: Image width in pixels
        height: Image height in pixels
        id: Row identity assigned by the store
        created_at: Row creation timestamp (store maintained)
        updated_at: Last update timestamp (store maintained)
    """
    key: str
    content_hash: str
    modified_at_ms: int
    blurhash: str
    width: int
    height: int
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def result(self) -> FingerprintResult:
        """The stored fingerprint as a result object."""
        return FingerprintResult(self.blurhash, self.width, self.height)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> 'CacheEntry':
        """Create a CacheEntry from a blurhash_cache row."""
        return cls(
            key=row['relative_path'],
            content_hash=row['xxhash'],
            modified_at_ms=row['mtime_ms'],
            blurhash=row['blurhash'],
            width=row['width'],
            height=row['height'],
            id=row['id'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )


class CacheOutcome(str, enum.Enum):
    """What a validation pass did for one file."""
    HIT = 'hit'                 # mtime matched, nothing read
    REFRESHED = 'refreshed'     # mtime changed, bytes identical
    RECOMPUTED = 'recomputed'   # bytes changed, fingerprint rebuilt
    MISS = 'miss'               # no row yet, inserted


@dataclass
class ValidationStats:
    """Counters for validation passes since the validator was created."""
    hits: int = 0
    refreshed: int = 0
    recomputed: int = 0
    misses: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.refreshed + self.recomputed + self.misses

    @property
    def hit_rate(self) -> float:
        """Percentage of passes served without re-encoding."""
        if self.total == 0:
            return 0.0
        return ((self.hits + self.refreshed) / self.total) * 100

    def record(self, outcome: CacheOutcome):
        """Count one validation outcome."""
        if outcome is CacheOutcome.HIT:
            self.hits += 1
        elif outcome is CacheOutcome.REFRESHED:
            self.refreshed += 1
        elif outcome is CacheOutcome.RECOMPUTED:
            self.recomputed += 1
        else:
            self.misses += 1

    def to_dict(self) -> dict:
        return {
            'hits': self.hits,
            'refreshed': self.refreshed,
            'recomputed': self.recomputed,
            'misses': self.misses,
            'total': self.total,
            'hit_rate': round(self.hit_rate, 1),
        }
