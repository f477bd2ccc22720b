"""
Image file discovery for cache warming.

Lists the image files under a directory so `blurest warm` can compute
their blurhashes ahead of the first real request.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from .config import IMAGE_EXTENSIONS
from .fingerprint import HAS_HEIF_SUPPORT

HEIF_EXTENSIONS = frozenset({'.heic', '.heif'})


def supported_extensions() -> frozenset[str]:
    """Extensions that can actually be decoded with the installed plugins."""
    if HAS_HEIF_SUPPORT:
        return frozenset(IMAGE_EXTENSIONS)
    return frozenset(IMAGE_EXTENSIONS) - HEIF_EXTENSIONS


def iter_image_files(directory: str | Path, recursive: bool = True) -> Iterator[Path]:
    """
    Yield image files below ``directory`` in walk order.

    Hidden directories (names starting with '.') are not descended into.
    """
    extensions = supported_extensions()
    for dirpath, dirnames, filenames in os.walk(directory):
        if recursive:
            dirnames[:] = [d for d in dirnames if not d.startswith('.')]
        else:
            dirnames.clear()
        for name in filenames:
            if os.path.splitext(name)[1].lower() in extensions:
                path = Path(dirpath, name)
                if path.is_file():
                    yield path


def find_image_files(root_path: str | Path, recursive: bool = True) -> list[str]:
    """
    Collect image files for warming.

    Args:
        root_path: Directory to scan
        recursive: Also scan subdirectories

    Returns:
        Sorted, de-duplicated canonical paths. Symlinks pointing at the
        same file are listed once.
    """
    return sorted({str(path.resolve()) for path in iter_image_files(root_path, recursive)})


__all__ = ['find_image_files', 'iter_image_files', 'supported_extensions']
