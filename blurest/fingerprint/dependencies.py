"""
Third-party imports for the fingerprint package.

Pillow, numpy, blurhash and xxhash are required. pillow-heif adds
HEIC/HEIF decoding and tqdm adds progress bars to cache warming; both
are optional and reported through HAS_HEIF_SUPPORT / HAS_TQDM.
"""

from __future__ import annotations

import logging
import warnings
from typing import Iterable, TypeVar

from ..user_config import get_user_config

logger = logging.getLogger(__name__)

T = TypeVar('T')

try:
    from PIL import Image
    import numpy as np
    import blurhash
    import xxhash
except ImportError as e:
    raise ImportError(
        f"Missing a required package ({e.name}).\n"
        "Install with: pip install Pillow numpy blurhash xxhash"
    ) from e

# pillow-heif registers itself as a Pillow plugin; must run before any decode
try:
    from pillow_heif import register_heif_opener
except ImportError:
    HAS_HEIF_SUPPORT = False
    logger.warning(
        "pillow-heif is not available, .heic/.heif images cannot be decoded. "
        "Install with: pip install pillow-heif"
    )
else:
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
    logger.debug("Registered HEIC/HEIF opener")

# Pillow warns above MAX_IMAGE_PIXELS and raises above twice that
Image.MAX_IMAGE_PIXELS = get_user_config().max_image_pixels
warnings.simplefilter('ignore', Image.DecompressionBombWarning)

try:
    from tqdm import tqdm
except ImportError:
    tqdm = None
HAS_TQDM = tqdm is not None


def progress_bar(items: Iterable[T], enabled: bool = True, **kwargs) -> Iterable[T]:
    """Wrap ``items`` in a tqdm bar when tqdm is installed and ``enabled``."""
    if enabled and HAS_TQDM:
        return tqdm(items, **kwargs)
    return items


__all__ = [
    'Image',
    'np',
    'blurhash',
    'xxhash',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'progress_bar',
]
