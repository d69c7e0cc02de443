"""
User configuration management for quadmatch.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.quadmatch/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.quadmatch/config.json

Example config.json:
{
    "similarity_threshold": 0.85,
    "max_dimension": 250,
    "split_quadrants": 32,
    "background_removal_fraction": 0.05,
    "max_images": 1000,
    "workers": 4
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DEFAULT_MAX_DIMENSION,
    DEFAULT_SPLIT_QUADRANTS,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_BACKGROUND_REMOVAL_FRACTION,
    DEFAULT_MAX_IMAGES,
    DEFAULT_WORKERS,
    MatchConfig,
)

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
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
        env_dir = os.getenv('QUADMATCH_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        return Path.home() / '.quadmatch'

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
                # Try to parse as JSON for numbers and null
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        return default

    @property
    def similarity_threshold(self) -> float:
        """Per-channel similarity threshold (0-1]."""
        return self.get(
            'similarity_threshold',
            default=DEFAULT_SIMILARITY_THRESHOLD,
            env_var='QUADMATCH_THRESHOLD'
        )

    @property
    def max_dimension(self) -> int:
        """Longer side of the normalized raster."""
        return self.get(
            'max_dimension',
            default=DEFAULT_MAX_DIMENSION,
            env_var='QUADMATCH_MAX_DIMENSION'
        )

    @property
    def split_quadrants(self) -> int:
        """Grid cell target (cells per axis = half of this)."""
        return self.get(
            'split_quadrants',
            default=DEFAULT_SPLIT_QUADRANTS,
            env_var='QUADMATCH_SPLIT_QUADRANTS'
        )

    @property
    def background_removal_fraction(self) -> float:
        """Fraction of distinct colors discarded as background."""
        return self.get(
            'background_removal_fraction',
            default=DEFAULT_BACKGROUND_REMOVAL_FRACTION,
            env_var='QUADMATCH_BACKGROUND_FRACTION'
        )

    @property
    def max_images(self) -> Optional[int]:
        """Cap on corpus size (null = unlimited)."""
        return self.get(
            'max_images',
            default=DEFAULT_MAX_IMAGES,
            env_var='QUADMATCH_MAX_IMAGES'
        )

    @property
    def workers(self) -> int:
        """Number of parallel workers."""
        return self.get(
            'workers',
            default=DEFAULT_WORKERS,
            env_var='QUADMATCH_WORKERS'
        )

    def build_match_config(self, **overrides: Any) -> MatchConfig:
        """
        Build a MatchConfig from the layered settings.

        Args:
            **overrides: Runtime values; None means "not given" and falls
                through to the environment, the file, then the defaults

        Returns:
            MatchConfig (not yet validated)
        """
        values = {
            'max_dimension': self.max_dimension,
            'split_quadrants': self.split_quadrants,
            'similarity_threshold': self.similarity_threshold,
            'background_removal_fraction': self.background_removal_fraction,
            'max_images': self.max_images,
            'workers': self.workers,
            'use_prefilter': None,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return MatchConfig(**values)

    def create_example_config(self):
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "quadmatch user configuration",
            "similarity_threshold": DEFAULT_SIMILARITY_THRESHOLD,
            "max_dimension": DEFAULT_MAX_DIMENSION,
            "split_quadrants": DEFAULT_SPLIT_QUADRANTS,
            "background_removal_fraction": DEFAULT_BACKGROUND_REMOVAL_FRACTION,
            "max_images": DEFAULT_MAX_IMAGES,
            "workers": DEFAULT_WORKERS,
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
