"""
Configuration constants for the blurhash cache.

This module contains the built-in defaults:
- Blurhash component counts and the encode thumbnail bound
- Supported image extensions for directory warming
- Default cache database location
"""

import os

# Blurhash components along each axis (1-9)
DEFAULT_X_COMPONENTS = 4
DEFAULT_Y_COMPONENTS = 3

# Images are shrunk to fit this box before encoding.
# Reported width/height are always those of the original image.
ENCODE_MAX_SIZE = 64

# Decompression bomb limit for Pillow (pixels)
MAX_IMAGE_PIXELS = 500_000_000

# Extensions picked up by `blurest warm`
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.ico', '.tga', '.ppm', '.pgm', '.pbm', '.pnm',
    '.heic', '.heif', '.avif',
}

# SQLite cache database location
CACHE_DB_FILE = os.path.join(os.path.expanduser('~'), '.blurest_cache.db')
