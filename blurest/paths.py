"""
Path resolution for cache keys.

Turns caller-supplied image paths into canonical absolute paths and the
root-relative keys the cache table is indexed on. Keys always use '/'
separators so a cache database can move between platforms.
"""

from __future__ import annotations

import os
from pathlib import Path

from .exceptions import (
    InitError,
    InvalidEncodingError,
    OutsideRootError,
    PathNotFoundError,
)


def canonicalize_root(root: str | os.PathLike) -> Path:
    """
    Resolve the project root once, at context initialization.

    Args:
        root: Project root directory (absolute or relative to cwd)

    Returns:
        Canonical absolute root path

    Raises:
        InitError: If the root does not exist or is not a directory
    """
    try:
        resolved = Path(root).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InitError(f"Failed to resolve project root path {root!s}: {e}") from e

    if not resolved.is_dir():
        raise InitError(f"Project root is not a directory: {resolved}")
    return resolved


def resolve_cache_key(root: Path, input_path: str | os.PathLike) -> tuple[str, Path]:
    """
    Resolve an image path to its cache key.

    Symbolic links are followed and '.'/'..' collapsed before the
    containment check, so a link inside the root that points outside it
    is rejected. Relative paths are taken relative to ``root``.

    Args:
        root: Canonical project root (see canonicalize_root)
        input_path: Path to the image

    Returns:
        Tuple of (cache key, canonical absolute path)

    Raises:
        PathNotFoundError: The target does not exist
        OutsideRootError: The target is not a descendant of root
        InvalidEncodingError: The key is not representable as UTF-8

    Examples:
        >>> resolve_cache_key(Path('/proj'), '/proj/img/a.png')
        ('img/a.png', PosixPath('/proj/img/a.png'))
    """
    candidate = Path(input_path)
    if not candidate.is_absolute():
        candidate = root / candidate

    try:
        absolute = candidate.resolve(strict=True)
    except FileNotFoundError as e:
        raise PathNotFoundError(f"Failed to find file at: {input_path!s}") from e
    except (OSError, RuntimeError) as e:
        # Symlink loops and unreadable path components land here
        raise PathNotFoundError(f"Failed to resolve {input_path!s}: {e}") from e

    try:
        relative = absolute.relative_to(root)
    except ValueError as e:
        raise OutsideRootError(
            f"Image path is not within the project root: {absolute}"
        ) from e

    key = relative.as_posix()
    try:
        # Undecodable filename bytes survive as lone surrogates
        key.encode('utf-8')
    except UnicodeEncodeError as e:
        raise InvalidEncodingError(
            f"Path contains non-UTF8 characters: {key!r}"
        ) from e

    return key, absolute


__all__ = ['canonicalize_root', 'resolve_cache_key']
