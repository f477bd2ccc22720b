"""
Unit tests for the command-line interface.
"""

import json

import pytest

from blurest.cli import main
from blurest.cli.arg_parser import parse_arguments
from blurest.cli.reporting import format_size
from blurest.discovery import find_image_files
from conftest import make_image


def run_cli(capsys, *argv):
    exit_code = main(list(argv))
    return exit_code, capsys.readouterr().out


class TestArgParser:
    """Test argument parsing."""

    def test_get(self):
        args = parse_arguments(['get', 'a.png', 'b.png', '--db', 'x.db'])
        assert args.command == 'get'
        assert args.paths == ['a.png', 'b.png']
        assert args.db_path == 'x.db'
        assert args.root is None

    def test_warm_defaults(self):
        args = parse_arguments(['warm'])
        assert args.directory is None
        assert not args.no_recursive
        assert not args.no_progress

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])


class TestGetCommand:
    """blurest get."""

    def test_prints_json_per_path(self, capsys, project_root, sample_images, temp_cache_db):
        code, out = run_cli(
            capsys, 'get', sample_images['red'], 'sub/wide.png',
            '--root', str(project_root), '--db', temp_cache_db,
        )
        assert code == 0
        lines = [json.loads(line) for line in out.strip().splitlines()]
        assert [line['success'] for line in lines] == [True, True]
        assert lines[0]['path'] == sample_images['red']
        assert (lines[1]['width'], lines[1]['height']) == (200, 50)

    def test_failure_sets_exit_code(self, capsys, project_root, sample_images, temp_cache_db):
        code, out = run_cli(
            capsys, 'get', sample_images['corrupted'],
            '--root', str(project_root), '--db', temp_cache_db,
        )
        assert code == 1
        assert json.loads(out)['code'] == 'decode_error'

    def test_bad_root(self, capsys, temp_dir, temp_cache_db):
        code, _ = run_cli(
            capsys, 'get', 'a.png', '--root', str(temp_dir / "missing"), '--db', temp_cache_db,
        )
        assert code == 1

    def test_root_from_config_env(self, capsys, monkeypatch, project_root, sample_images, temp_cache_db):
        monkeypatch.setenv('BLUREST_ROOT', str(project_root))
        monkeypatch.setenv('BLUREST_CACHE_DB', temp_cache_db)
        code, out = run_cli(capsys, 'get', 'red.png')
        assert code == 0
        assert json.loads(out)['success'] is True


class TestWarmCommand:
    """blurest warm."""

    def test_warm_clean_directory(self, capsys, project_root, temp_cache_db):
        images = project_root / "images"
        images.mkdir()
        make_image(images / "a.png", 'red')
        make_image(images / "b.jpg", 'blue', fmt='JPEG')

        code, out = run_cli(
            capsys, 'warm', str(images), '--no-progress',
            '--root', str(project_root), '--db', temp_cache_db,
        )
        assert code == 0
        assert "BLURHASH CACHE SUMMARY" in out
        assert "Encoded (new):          2" in out

    def test_warm_reports_failures(self, capsys, project_root, sample_images, temp_cache_db):
        code, out = run_cli(
            capsys, 'warm', '--no-progress',
            '--root', str(project_root), '--db', temp_cache_db,
        )
        assert code == 1
        assert "Failed:                 1" in out

    def test_second_warm_is_all_hits(self, capsys, project_root, temp_cache_db):
        make_image(project_root / "a.png", 'red')
        args = ('warm', '--no-progress', '--root', str(project_root), '--db', temp_cache_db)
        run_cli(capsys, *args)

        code, out = run_cli(capsys, *args)
        assert code == 0
        assert "Unchanged (mtime):      1" in out
        assert "Reuse rate:             100.0%" in out

    def test_missing_directory(self, capsys, project_root, temp_cache_db):
        code, _ = run_cli(
            capsys, 'warm', str(project_root / "nope"), '--no-progress',
            '--root', str(project_root), '--db', temp_cache_db,
        )
        assert code == 1


class TestStatsCommand:
    """blurest stats."""

    def test_stats(self, capsys, project_root, sample_images, temp_cache_db):
        run_cli(capsys, 'get', sample_images['red'], '--root', str(project_root), '--db', temp_cache_db)
        code, out = run_cli(capsys, 'stats', '--root', str(project_root), '--db', temp_cache_db)
        assert code == 0
        assert "Entries:       1" in out


class TestConfigCommand:
    """blurest config."""

    def test_show(self, capsys):
        code, out = run_cli(capsys, 'config')
        assert code == 0
        assert "Status: not found" in out
        assert "x_components: 4" in out

    def test_init_creates_file(self, capsys, temp_dir):
        code, out = run_cli(capsys, 'config', '--init')
        assert code == 0
        assert (temp_dir / "config" / "config.json").exists()
        assert "Created example configuration file" in out


class TestFormatSize:
    """Human-readable sizes in the stats report."""

    @pytest.mark.parametrize("size, expected", [
        (0, "0.0 B"),
        (1023, "1023.0 B"),
        (1536, "1.5 KB"),
        (3 * 1024 ** 2, "3.0 MB"),
        (2 * 1024 ** 4, "2.0 TB"),
    ])
    def test_format_size(self, size, expected):
        assert format_size(size) == expected


class TestDiscovery:
    """Image discovery used by warm."""

    def test_finds_images_sorted(self, project_root, sample_images):
        (project_root / "notes.txt").write_text("not an image")
        found = find_image_files(project_root)
        assert found == sorted(found)
        assert sample_images['wide'] in found
        assert not any(path.endswith("notes.txt") for path in found)
        # Discovery goes by extension; decoding decides later
        assert sample_images['corrupted'] in found

    def test_non_recursive(self, project_root, sample_images):
        found = find_image_files(project_root, recursive=False)
        assert sample_images['red'] in found
        assert sample_images['wide'] not in found

    def test_skips_hidden_directories(self, project_root):
        hidden = project_root / ".cache"
        hidden.mkdir()
        make_image(hidden / "thumb.png")
        assert find_image_files(project_root) == []

    def test_symlink_listed_once(self, project_root, sample_images):
        (project_root / "alias.png").symlink_to(sample_images['red'])
        found = find_image_files(project_root)
        assert found.count(sample_images['red']) == 1
