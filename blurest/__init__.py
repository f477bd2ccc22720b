"""
blurest
=======
Cached blurhash placeholders for image files.

Features:
- Blurhash + pixel dimensions for any Pillow-readable image (HEIC via pillow-heif)
- SQLite cache keyed by project-relative path
- Two-tier change detection: mtime first, XXH3 content hash second
- Thread-safe shared context with explicit init / clear lifecycle
- Call gateway returning plain result dictionaries for embedding hosts
- CLI for one-off lookups and cache warming
"""

__version__ = "0.2.2"
__author__ = "blurest contributors"

from .models import CacheEntry, CacheOutcome, FingerprintResult, ValidationStats
from .exceptions import (
    BlurestError,
    PathNotFoundError,
    OutsideRootError,
    InvalidEncodingError,
    FileAccessError,
    DecodeError,
    StoreError,
    NotInitializedError,
    InitError,
    ContextCorruptedError,
)
from .paths import canonicalize_root, resolve_cache_key
from .database import BlurhashCache
from .fingerprint import ImageFingerprinter, fast_hash, format_hash
from .validator import CacheValidator
from .context import AppContext, SharedContext
from .gateway import CallGateway, get_gateway, reset_gateway

__all__ = [
    "CacheEntry",
    "CacheOutcome",
    "FingerprintResult",
    "ValidationStats",
    "BlurestError",
    "PathNotFoundError",
    "OutsideRootError",
    "InvalidEncodingError",
    "FileAccessError",
    "DecodeError",
    "StoreError",
    "NotInitializedError",
    "InitError",
    "ContextCorruptedError",
    "canonicalize_root",
    "resolve_cache_key",
    "BlurhashCache",
    "ImageFingerprinter",
    "fast_hash",
    "format_hash",
    "CacheValidator",
    "AppContext",
    "SharedContext",
    "CallGateway",
    "get_gateway",
    "reset_gateway",
]
