"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import os
import struct

from blurest.context import SharedContext
from blurest.database import BlurhashCache
from blurest.fingerprint import ImageFingerprinter
from blurest.paths import canonicalize_root
from blurest.user_config import get_user_config


CONFIG_ENV_VARS = [
    'BLUREST_CONFIG_DIR', 'BLUREST_CACHE_DB', 'BLUREST_ROOT',
    'BLUREST_X_COMPONENTS', 'BLUREST_Y_COMPONENTS',
    'BLUREST_ENCODE_MAX_SIZE', 'BLUREST_MAX_PIXELS',
]


class CountingFingerprinter(ImageFingerprinter):
    """Fingerprinter that counts how often bytes are hashed and encoded."""

    def __init__(self):
        super().__init__()
        self.hash_calls = 0
        self.fingerprint_calls = 0

    def content_hash(self, data):
        self.hash_calls += 1
        return super().content_hash(data)

    def fingerprint(self, data):
        self.fingerprint_calls += 1
        return super().fingerprint(data)


def make_image(path, color='red', size=(100, 100), fmt='PNG'):
    """Write a solid-colour image and return its path as a string."""
    Image.new('RGB', size, color=color).save(path, fmt)
    return str(path)


def set_mtime_ms(path, mtime_ms):
    """Set both atime and mtime of ``path`` to an exact millisecond value."""
    ns = mtime_ms * 1_000_000
    os.utime(path, ns=(ns, ns))


def make_malformed_tiff(path):
    """
    Write a TIFF whose header parses but whose tags are nonsense.

    ImageWidth is stored as a FLOAT and the strip holds fewer bytes than
    StripByteCounts promises, so the failure comes from deep inside
    Pillow rather than from its format check.
    """
    entries = [
        (256, 11, 1, struct.pack('<f', 16.5)),     # ImageWidth (FLOAT)
        (257, 3, 1, struct.pack('<HH', 16, 0)),    # ImageLength
        (258, 3, 1, struct.pack('<HH', 8, 0)),     # BitsPerSample
        (259, 3, 1, struct.pack('<HH', 1, 0)),     # Compression: none
        (262, 3, 1, struct.pack('<HH', 1, 0)),     # Photometric: black is zero
        (273, 4, 1, None),                          # StripOffsets
        (277, 3, 1, struct.pack('<HH', 1, 0)),     # SamplesPerPixel
        (278, 3, 1, struct.pack('<HH', 16, 0)),    # RowsPerStrip
        (279, 4, 1, struct.pack('<I', 256)),       # StripByteCounts
    ]
    ifd_offset = 8
    data_offset = ifd_offset + 2 + 12 * len(entries) + 4

    ifd = struct.pack('<H', len(entries))
    for tag, type_, count, value in entries:
        if value is None:
            value = struct.pack('<I', data_offset)
        ifd += struct.pack('<HHI', tag, type_, count) + value
    ifd += struct.pack('<I', 0)

    with open(path, 'wb') as f:
        f.write(b'II' + struct.pack('<HI', 42, ifd_offset) + ifd + bytes(range(16)))
    return str(path)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch, temp_dir):
    """Keep the user's real ~/.blurest config and BLUREST_* env out of tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('BLUREST_CONFIG_DIR', str(temp_dir / 'config'))
    get_user_config().reload()
    yield
    get_user_config().reload()


@pytest.fixture
def project_root(temp_dir):
    """Canonical project root directory containing sample images."""
    root = temp_dir / "project"
    root.mkdir()
    return canonicalize_root(root)


@pytest.fixture
def sample_images(project_root):
    """
    Create a set of sample images inside the project root.

    Returns:
        dict with paths to:
        - red: 100x100 red PNG at the root
        - blue: 100x100 blue PNG at the root
        - wide: 200x50 green PNG in a subdirectory
        - corrupted: text file with an image extension
    """
    images = {}
    images['red'] = make_image(project_root / "red.png", 'red')
    images['blue'] = make_image(project_root / "blue.png", 'blue')

    subdir = project_root / "sub"
    subdir.mkdir()
    images['wide'] = make_image(subdir / "wide.png", 'green', size=(200, 50))

    corrupted = project_root / "corrupted.png"
    corrupted.write_text("not an image")
    images['corrupted'] = str(corrupted)

    return images


@pytest.fixture
def temp_cache_db(temp_dir):
    """Create a temporary database file path for cache tests."""
    return str(temp_dir / "test_cache.db")


@pytest.fixture
def store(temp_cache_db):
    """Open BlurhashCache on a temporary database."""
    cache = BlurhashCache(temp_cache_db)
    yield cache
    cache.close()


@pytest.fixture
def context(temp_cache_db, project_root):
    """Ready SharedContext using a CountingFingerprinter."""
    ctx = SharedContext(fingerprinter_factory=CountingFingerprinter)
    ctx.init(temp_cache_db, project_root)
    yield ctx
    ctx.clear()


@pytest.fixture
def fingerprinter(context):
    """The CountingFingerprinter used by the ``context`` fixture."""
    return context.with_context(lambda app: app.validator.fingerprinter)
