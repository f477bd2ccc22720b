"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
blurest command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by every subcommand that opens the cache."""
    parser.add_argument(
        '--db',
        dest='db_path',
        default=None,
        help='Cache database file. Default: config cache_db_file or ~/.blurest_cache.db'
    )
    parser.add_argument(
        '--root',
        type=Path,
        default=None,
        help='Project root that cache keys are relative to. Default: config project_root or cwd'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='blurest',
        description='Compute and cache blurhash placeholders for images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s get images/hero.jpg --root ./site
      Print the blurhash, width and height of one image as JSON

  %(prog)s warm ./site/images --root ./site --db ./site/.blurhash.db
      Pre-compute blurhashes for every image under a directory

  %(prog)s stats --db ./site/.blurhash.db
      Show how many images are cached

  %(prog)s config --init
      Write an example ~/.blurest/config.json
        """
    )
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    get_parser = subparsers.add_parser('get', help='Print blurhash results for images')
    get_parser.add_argument('paths', nargs='+', help='Image paths (relative paths are taken from the root)')
    _add_common_options(get_parser)

    warm_parser = subparsers.add_parser('warm', help='Pre-compute blurhashes for a directory')
    warm_parser.add_argument(
        'directory',
        type=Path,
        nargs='?',
        default=None,
        help='Directory to scan. Default: the project root'
    )
    warm_parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )
    warm_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )
    _add_common_options(warm_parser)

    stats_parser = subparsers.add_parser('stats', help='Show cache database statistics')
    _add_common_options(stats_parser)

    config_parser = subparsers.add_parser('config', help='Show or create the user configuration')
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example config file'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['warm', './site', '--no-recursive'])
        >>> args.command, args.no_recursive
        ('warm', True)
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
