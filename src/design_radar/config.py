"""
Configuration manager for Design Radar.
YAML file with dot-notation access, merged over built-in defaults.
"""
import copy
import logging
import os
from typing import Any, Dict, List, Optional
from pathlib import Path

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "design_radar.yaml"


class RadarConfig:
    """Configuration manager for Design Radar features."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from YAML file, falling back to defaults."""
        self._config = self._get_default_config()
        if not self.config_path.exists():
            logger.debug(f"No config at {self.config_path}, using defaults")
            return
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not load config from {self.config_path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config root in {self.config_path} must be a mapping")

        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(self._config.get(section), dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _get_default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return copy.deepcopy({
            'figma': {
                'token_env': 'FIGMA_TOKEN',
                'file_keys': [],
                'api_base': 'https://api.figma.com/v1',
                'timeout_seconds': 30,
            },
            'store': {
                'db_path': '.radar/design_radar.sqlite',
                'keep_snapshots': 10,
            },
            'normalize': {
                'hoist_text_style': True,
                'extra_properties': [],
            },
        })

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'store.db_path')."""
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section."""
        return self._config.get(section, {})

    @property
    def file_keys(self) -> List[str]:
        keys = self.get('figma.file_keys') or []
        if isinstance(keys, str):
            keys = keys.split(',')
        return [k.strip() for k in keys if k and k.strip()]

    def figma_token(self) -> Optional[str]:
        """Read the Figma token from the configured environment variable."""
        return os.environ.get(self.get('figma.token_env', 'FIGMA_TOKEN'))


def ensure_radar_dirs(config: RadarConfig) -> None:
    """Ensure the snapshot database directory exists."""
    db_path = Path(config.get('store.db_path', '.radar/design_radar.sqlite'))
    db_path.parent.mkdir(parents=True, exist_ok=True)
