"""
CLI workflow orchestration for blurest.

Provides the CLIOrchestrator class that parses arguments, initializes the
cache through the call gateway and dispatches to one subcommand.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..discovery import find_image_files
from ..exceptions import BlurestError, ContextCorruptedError, InitError
from ..fingerprint.dependencies import progress_bar
from ..gateway import CallGateway
from ..user_config import get_user_config
from .arg_parser import parse_arguments
from .reporting import print_result, print_store_stats, print_validation_summary


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Runs one blurest subcommand.

    The gateway is injectable for tests. The context is cleared when the
    command finishes.
    """

    def __init__(self, argv: Optional[list[str]] = None, gateway: Optional[CallGateway] = None):
        """Initialize the orchestrator."""
        self.argv = argv
        self.gateway = gateway or CallGateway()
        self.logger = logging.getLogger(__name__)
        self.args = None

    def run(self) -> int:
        """
        Execute the selected subcommand.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(getattr(self.args, 'verbose', False))

        if self.args.command == 'config':
            return self._config_command()

        exit_code = self._initialize()
        if exit_code != 0:
            return exit_code

        try:
            if self.args.command == 'get':
                return self._get_command()
            if self.args.command == 'warm':
                return self._warm_command()
            return self._stats_command()
        except ContextCorruptedError as e:
            self.logger.error(f"Cache context corrupted: {e}")
            return 1
        finally:
            self.gateway.clear_context()

    def _initialize(self) -> int:
        """Open the cache database and set the project root."""
        config = get_user_config()
        db_path = self.args.db_path or config.cache_db_file
        root = self.args.root or config.project_root or os.getcwd()

        try:
            self.gateway.initialize(db_path, root)
        except InitError as e:
            self.logger.error(str(e))
            return 1
        return 0

    def _get_command(self) -> int:
        failures = 0
        for path in self.args.paths:
            result = self.gateway.get_blurhash(path)
            if not result['success']:
                failures += 1
            print_result(path, result)
        return 1 if failures else 0

    def _warm_command(self) -> int:
        directory = self.args.directory
        if directory is None:
            directory = self.args.root or get_user_config().project_root or os.getcwd()
        if not os.path.isdir(directory):
            self.logger.error(f"Directory not found: {directory}")
            return 1

        recursive = not self.args.no_recursive
        image_files = find_image_files(directory, recursive=recursive)
        self.logger.info(f"Found {len(image_files):,} image files in {directory}")

        iterator = progress_bar(
            image_files, enabled=not self.args.no_progress, desc="Encoding", unit="img"
        )

        failures = 0
        for path in iterator:
            result = self.gateway.get_blurhash(path)
            if not result['success']:
                failures += 1
                self.logger.warning(f"{path}: {result['error']}")

        print_validation_summary(self.gateway.validation_stats(), failures)
        return 1 if failures else 0

    def _stats_command(self) -> int:
        try:
            stats = self.gateway.store_stats()
        except ContextCorruptedError:
            raise
        except BlurestError as e:
            self.logger.error(f"Failed to read cache statistics: {e}")
            return 1
        print_store_stats(stats)
        return 0

    def _config_command(self) -> int:
        config = get_user_config()

        if self.args.init:
            if config.create_example_config():
                print("Created example configuration file at:")
                print(f"  {config.config_file_path}")
                return 0
            print("Failed to create configuration file.")
            return 1

        print(f"Configuration file: {config.config_file_path}")
        if config.config_file_path.exists():
            print("Status: found")
        else:
            print("Status: not found (using defaults)")
            print("\nRun 'blurest config --init' to create one.")

        print("\nCurrent settings:")
        print(f"  cache_db_file: {config.cache_db_file}")
        print(f"  project_root: {config.project_root or '(current directory)'}")
        print(f"  x_components: {config.x_components}")
        print(f"  y_components: {config.y_components}")
        print(f"  encode_max_size: {config.encode_max_size}")
        print(f"  max_image_pixels: {config.max_image_pixels:,}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
