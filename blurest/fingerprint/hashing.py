"""
Hashing module for the fingerprint package.

Provides the fast content hash used for change detection and the
blurhash encoder that produces placeholders from image bytes.

Placeholders are encoded from a small RGB thumbnail, so they are not
byte-identical to blurhashes computed from full-size RGBA pixels by
other encoders sharing the same cache table.
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from ..config import DEFAULT_X_COMPONENTS, DEFAULT_Y_COMPONENTS
from ..exceptions import DecodeError
from ..models import FingerprintResult
from ..user_config import get_user_config
from .dependencies import Image, np, blurhash, xxhash


logger = logging.getLogger(__name__)


def fast_hash(data: bytes) -> int:
    """
    Calculate the XXH3 64-bit hash of raw file bytes.

    Not cryptographic; only used to tell whether bytes changed.
    """
    return xxhash.xxh3_64_intdigest(data)


def format_hash(value: int) -> str:
    """Render a 64-bit hash as lowercase hex of its big-endian bytes."""
    return value.to_bytes(8, 'big').hex()


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes with Pillow.

    Args:
        data: Raw file bytes

    Returns:
        Fully loaded PIL image

    Raises:
        DecodeError: If the bytes are not a supported, intact image
    """
    try:
        img = Image.open(io.BytesIO(data))
        # Force load to detect truncated/corrupt images early
        img.load()
        return img
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image exceeds pixel limit: {e}") from e
    except Exception as e:
        # Corrupt input surfaces as OSError, SyntaxError, TypeError, struct.error...
        raise DecodeError(f"Unsupported or corrupt image data: {e}") from e


def encode_blurhash(
    img: Image.Image,
    x_components: int = DEFAULT_X_COMPONENTS,
    y_components: int = DEFAULT_Y_COMPONENTS,
    max_size: Optional[int] = None,
) -> str:
    """
    Encode a decoded image as a blurhash string.

    The image is converted to RGB (alpha is not part of a blurhash) and
    shrunk to fit ``max_size`` before encoding.

    Args:
        img: Decoded PIL image
        x_components: Horizontal components (1-9)
        y_components: Vertical components (1-9)
        max_size: Longest edge of the encode thumbnail (None = configured)

    Returns:
        Blurhash string

    Raises:
        DecodeError: If the image cannot be converted or encoded
    """
    if max_size is None:
        max_size = get_user_config().encode_max_size

    try:
        rgb = img.convert('RGB')
        rgb.thumbnail((max_size, max_size))
        pixels = np.asarray(rgb, dtype=np.uint8)
        return blurhash.encode(pixels, components_x=x_components, components_y=y_components)
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image exceeds pixel limit: {e}") from e
    except Exception as e:
        logger.debug(f"Blurhash encoding failed (mode={img.mode}, size={img.size}): {e}")
        raise DecodeError(f"Failed to encode blurhash: {e}") from e


class ImageFingerprinter:
    """
    Produces content hashes and blurhash fingerprints from file bytes.

    The validator only talks to this class, so tests can substitute a
    subclass that counts or fails calls.
    """

    def __init__(self, x_components: Optional[int] = None, y_components: Optional[int] = None):
        config = get_user_config()
        self.x_components = x_components or config.x_components
        self.y_components = y_components or config.y_components

    def content_hash(self, data: bytes) -> str:
        """Hex XXH3-64 of ``data`` as stored in the cache."""
        return format_hash(fast_hash(data))

    def decode_dimensions(self, data: bytes) -> tuple[int, int]:
        """Width and height of the encoded image."""
        with decode_image(data) as img:
            return img.size

    def fingerprint(self, data: bytes) -> FingerprintResult:
        """
        Decode ``data`` and compute its blurhash and dimensions.

        Raises:
            DecodeError: If the bytes are not a supported image
        """
        with decode_image(data) as img:
            width, height = img.size
            encoded = encode_blurhash(img, self.x_components, self.y_components)
        return FingerprintResult(blurhash=encoded, width=width, height=height)


__all__ = [
    'fast_hash',
    'format_hash',
    'decode_image',
    'encode_blurhash',
    'ImageFingerprinter',
]
