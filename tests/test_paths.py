"""
Unit tests for cache key resolution.
"""

import os
import sys

import pytest

from blurest.exceptions import (
    InitError,
    InvalidEncodingError,
    OutsideRootError,
    PathNotFoundError,
)
from blurest.paths import canonicalize_root, resolve_cache_key
from conftest import make_image


class TestCanonicalizeRoot:
    """Test canonicalize_root."""

    def test_resolves_dot_segments(self, project_root):
        messy = project_root / "sub" / ".."
        (project_root / "sub").mkdir(exist_ok=True)
        assert canonicalize_root(messy) == project_root

    def test_missing_root_raises(self, temp_dir):
        with pytest.raises(InitError):
            canonicalize_root(temp_dir / "does-not-exist")

    def test_file_root_raises(self, temp_dir):
        path = temp_dir / "file.txt"
        path.write_text("x")
        with pytest.raises(InitError):
            canonicalize_root(path)


class TestResolveCacheKey:
    """Test resolve_cache_key."""

    def test_absolute_path(self, project_root, sample_images):
        key, absolute = resolve_cache_key(project_root, sample_images['red'])
        assert key == "red.png"
        assert absolute == project_root / "red.png"

    def test_nested_key_uses_forward_slashes(self, project_root, sample_images):
        key, _ = resolve_cache_key(project_root, sample_images['wide'])
        assert key == "sub/wide.png"

    def test_relative_path_taken_from_root(self, project_root, sample_images):
        key, absolute = resolve_cache_key(project_root, os.path.join("sub", "wide.png"))
        assert key == "sub/wide.png"
        assert absolute.is_absolute()

    def test_dot_dot_collapsed(self, project_root, sample_images):
        key, _ = resolve_cache_key(project_root, project_root / "sub" / ".." / "red.png")
        assert key == "red.png"

    def test_missing_file(self, project_root):
        with pytest.raises(PathNotFoundError):
            resolve_cache_key(project_root, project_root / "nope.png")

    def test_outside_root(self, temp_dir, project_root):
        outside = make_image(temp_dir / "outside.png")
        with pytest.raises(OutsideRootError):
            resolve_cache_key(project_root, outside)

    def test_dot_dot_escape_is_outside_root(self, temp_dir, project_root):
        make_image(temp_dir / "outside.png")
        with pytest.raises(OutsideRootError):
            resolve_cache_key(project_root, "../outside.png")

    def test_prefix_sibling_is_outside_root(self, temp_dir, project_root):
        """A sibling directory sharing the root's name prefix is not inside it."""
        sibling = temp_dir / (project_root.name + "-other")
        sibling.mkdir()
        path = make_image(sibling / "a.png")
        with pytest.raises(OutsideRootError):
            resolve_cache_key(project_root, path)

    @pytest.mark.skipif(not hasattr(os, 'symlink') or sys.platform == 'win32',
                        reason="symlinks not available")
    def test_symlink_followed_before_root_check(self, temp_dir, project_root):
        target = make_image(temp_dir / "outside.png")
        link = project_root / "link.png"
        os.symlink(target, link)
        with pytest.raises(OutsideRootError):
            resolve_cache_key(project_root, link)

    @pytest.mark.skipif(not hasattr(os, 'symlink') or sys.platform == 'win32',
                        reason="symlinks not available")
    def test_symlink_inside_root_uses_target_key(self, project_root, sample_images):
        link = project_root / "alias.png"
        os.symlink(sample_images['red'], link)
        key, _ = resolve_cache_key(project_root, link)
        assert key == "red.png"

    @pytest.mark.skipif(sys.platform != 'linux', reason="needs byte filenames")
    def test_non_utf8_name_rejected(self, project_root):
        raw = os.fsencode(str(project_root)) + b"/bad\xff.png"
        fd = os.open(raw, os.O_CREAT | os.O_WRONLY)
        os.close(fd)
        with pytest.raises(InvalidEncodingError):
            resolve_cache_key(project_root, os.fsdecode(raw))
