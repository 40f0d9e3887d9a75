"""
User configuration management for boardhash.

Supports configuration from multiple sources (in order of priority):
1. Command-line options (highest priority, applied by the CLI)
2. Environment variables
3. User config file (~/.boardhash/config.json)
4. Default values from config.py (lowest priority)

Example config.json:
{
    "database_file": "/var/lib/board/boardhash.db",
    "upload_root": "/var/www/board/uploads",
    "rehash_batch_size": 10,
    "dct_method": "separable",
    "max_image_pixels": 500000000
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DATABASE_FILE,
    UPLOAD_ROOT,
    REHASH_BATCH_SIZE,
    DEFAULT_DCT_METHOD,
    MAX_IMAGE_PIXELS,
)
from .hashing.algorithms import HashParams

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The config file is read lazily and cached until reload().
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('BOARDHASH_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        return Path.home() / '.boardhash'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                logger.warning(f"Ignoring config file {self.config_file_path}: expected a JSON object")
                return {}
            logger.debug(f"Loaded configuration from {self.config_file_path}")
            return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Numbers and null arrive as JSON; plain strings pass through
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if config_data.get(key) is not None:
            return config_data[key]

        return default

    @property
    def database_file(self) -> str:
        """Path to the SQLite hash store."""
        return str(self.get('database_file', default=DATABASE_FILE, env_var='BOARDHASH_DB'))

    @property
    def upload_root(self) -> str:
        """Directory that stored original paths are relative to."""
        return str(self.get('upload_root', default=UPLOAD_ROOT, env_var='BOARDHASH_UPLOAD_ROOT'))

    @property
    def rehash_batch_size(self) -> int:
        """Images per batch rehash run."""
        return int(self.get(
            'rehash_batch_size',
            default=REHASH_BATCH_SIZE,
            env_var='BOARDHASH_REHASH_BATCH'
        ))

    @property
    def dct_method(self) -> str:
        """DCT implementation used by the pHash ('separable' or 'direct')."""
        return str(self.get(
            'dct_method',
            default=DEFAULT_DCT_METHOD,
            env_var='BOARDHASH_DCT_METHOD'
        ))

    @property
    def max_image_pixels(self) -> int:
        """Maximum image size in pixels (decompression bomb limit)."""
        return int(self.get(
            'max_image_pixels',
            default=MAX_IMAGE_PIXELS,
            env_var='BOARDHASH_MAX_PIXELS'
        ))

    def hash_params(self) -> HashParams:
        """Hash parameters with the configured DCT method."""
        return HashParams(dct_method=self.dct_method)

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "boardhash user configuration",
            "database_file": DATABASE_FILE,
            "upload_root": UPLOAD_ROOT,
            "rehash_batch_size": REHASH_BATCH_SIZE,
            "dct_method": DEFAULT_DCT_METHOD,
            "max_image_pixels": MAX_IMAGE_PIXELS,
        }

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
