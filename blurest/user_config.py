"""
User settings for the blurhash cache.

A setting is looked up in this order, first match wins:
1. Explicit arguments (CLI flags, gateway parameters)
2. BLUREST_* environment variables
3. The JSON settings file (``$BLUREST_CONFIG_DIR/config.json``,
   default ``~/.blurest/config.json``)
4. Built-in defaults from config.py

A settings file looks like:
{
    "cache_db_file": "/srv/site/.blurhash.db",
    "project_root": "/srv/site",
    "x_components": 4,
    "y_components": 3,
    "encode_max_size": 64,
    "max_image_pixels": 500000000
}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional

from .config import (
    CACHE_DB_FILE,
    DEFAULT_X_COMPONENTS,
    DEFAULT_Y_COMPONENTS,
    ENCODE_MAX_SIZE,
    MAX_IMAGE_PIXELS,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = 'BLUREST_CONFIG_DIR'
CONFIG_FILE_NAME = 'config.json'


class Setting(NamedTuple):
    env_var: str
    default: Any
    cast: Optional[Callable[[Any], Any]] = None


SETTINGS = {
    'cache_db_file': Setting('BLUREST_CACHE_DB', None, str),
    'project_root': Setting('BLUREST_ROOT', None, str),
    'x_components': Setting('BLUREST_X_COMPONENTS', DEFAULT_X_COMPONENTS, int),
    'y_components': Setting('BLUREST_Y_COMPONENTS', DEFAULT_Y_COMPONENTS, int),
    'encode_max_size': Setting('BLUREST_ENCODE_MAX_SIZE', ENCODE_MAX_SIZE, int),
    'max_image_pixels': Setting('BLUREST_MAX_PIXELS', MAX_IMAGE_PIXELS, int),
}


def _parse_env_value(raw: str) -> Any:
    # Numbers arrive as JSON; paths are plain strings
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


class UserConfig:
    """
    Process-wide view of the user's blurest settings.

    The settings file is parsed on first use and kept until reload().
    Environment variables are read on every access so tests and hosts
    can change them at runtime.
    """

    _instance: Optional['UserConfig'] = None

    def __new__(cls):
        # One shared instance per process
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._file_values = None
            cls._instance = instance
        return cls._instance

    @property
    def config_dir(self) -> Path:
        override = os.getenv(CONFIG_DIR_ENV)
        return Path(override) if override else Path.home() / '.blurest'

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def _file_settings(self) -> dict:
        if self._file_values is None:
            self._file_values = self._read_settings_file()
        return self._file_values

    def _read_settings_file(self) -> dict:
        path = self.config_file_path
        if not path.is_file():
            return {}
        try:
            values = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return {}
        if not isinstance(values, dict):
            logger.warning(f"Ignoring settings file {path}: top level is not an object")
            return {}
        logger.debug(f"Read settings from {path}")
        return values

    def reload(self):
        """Drop the parsed settings file; it is read again on next access."""
        self._file_values = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Look up one setting.

        Args:
            key: Name in the settings file
            default: Returned when neither source has a value
            env_var: Environment variable that overrides the file

        Returns:
            The raw (uncast) value
        """
        if env_var:
            raw = os.getenv(env_var)
            if raw is not None:
                return _parse_env_value(raw)
        return self._file_settings().get(key, default)

    def _setting(self, key: str) -> Any:
        setting = SETTINGS[key]
        value = self.get(key, setting.default, setting.env_var)
        if value is None or setting.cast is None:
            return value
        return setting.cast(value)

    @property
    def cache_db_file(self) -> str:
        """SQLite file holding the cache table."""
        return self._setting('cache_db_file') or CACHE_DB_FILE

    @property
    def project_root(self) -> Optional[str]:
        """Directory cache keys are relative to (None means the cwd)."""
        return self._setting('project_root') or None

    @property
    def x_components(self) -> int:
        return self._setting('x_components')

    @property
    def y_components(self) -> int:
        return self._setting('y_components')

    @property
    def encode_max_size(self) -> int:
        """Longest edge of the thumbnail a blurhash is computed from."""
        return self._setting('encode_max_size')

    @property
    def max_image_pixels(self) -> int:
        """Pillow decompression bomb limit."""
        return self._setting('max_image_pixels')

    def create_example_config(self) -> bool:
        """Write a settings file filled with the defaults."""
        template = {"_comment": "blurest user configuration"}
        template.update({key: setting.default for key, setting in SETTINGS.items()})

        path = self.config_file_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(template, indent=2), encoding='utf-8')
        except OSError as e:
            logger.error(f"Could not write settings file {path}: {e}")
            return False
        logger.info(f"Wrote example settings to {path}")
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Shared UserConfig instance."""
    return _user_config
