"""
Fingerprint package: content hashing and blurhash encoding.

Public API:
- ImageFingerprinter: Collaborator used by the cache validator
- fast_hash / format_hash: XXH3-64 change-detection hash
- decode_image / encode_blurhash: Pillow decode and blurhash encode
"""

from __future__ import annotations

from .dependencies import HAS_HEIF_SUPPORT, HAS_TQDM
from .hashing import (
    fast_hash,
    format_hash,
    decode_image,
    encode_blurhash,
    ImageFingerprinter,
)

__all__ = [
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'fast_hash',
    'format_hash',
    'decode_image',
    'encode_blurhash',
    'ImageFingerprinter',
]
