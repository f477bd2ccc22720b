"""
Exception hierarchy for the blurhash cache.

Every failure the core can report is a BlurestError subclass. Each class
carries a stable ``code`` string that the call gateway copies into its
failure results, so callers can branch on the kind of error without
parsing messages.
"""

from __future__ import annotations


class BlurestError(Exception):
    """Base class for all blurhash cache errors."""

    code = "error"


class PathNotFoundError(BlurestError):
    """The requested image path does not exist."""

    code = "path_not_found"


class OutsideRootError(BlurestError):
    """The canonical image path is not inside the project root."""

    code = "outside_root"


class InvalidEncodingError(BlurestError):
    """The path cannot be represented as a UTF-8 cache key."""

    code = "invalid_encoding"


class FileAccessError(BlurestError):
    """File metadata or bytes could not be read."""

    code = "io_error"


class DecodeError(BlurestError):
    """The file bytes are not a supported or intact image."""

    code = "decode_error"


class StoreError(BlurestError):
    """A cache database lookup, insert or update failed."""

    code = "store_error"


class NotInitializedError(BlurestError):
    """The shared context has not been initialized (or was cleared)."""

    code = "not_initialized"


class InitError(BlurestError):
    """The shared context could not be initialized."""

    code = "init_error"


class ContextCorruptedError(BlurestError):
    """
    A previous holder of the context lock failed mid-operation.

    The store connection is no longer trusted. The context must be
    cleared or re-initialized before it can be used again.
    """

    code = "context_corrupted"


__all__ = [
    'BlurestError',
    'PathNotFoundError',
    'OutsideRootError',
    'InvalidEncodingError',
    'FileAccessError',
    'DecodeError',
    'StoreError',
    'NotInitializedError',
    'InitError',
    'ContextCorruptedError',
]
