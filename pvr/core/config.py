"""Configuration management for PVR"""

import os
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_HISTORY_RETENTION_DAYS = 90


class Config:
    """Manages PVR configuration from YAML and environment variables"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or os.getenv('PVR_CONFIG', DEFAULT_CONFIG_PATH))
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = yaml.safe_load(f)

        # yaml returns None for empty files
        if self._config is None:
            self._config = {}

        self._validate_recorded()

    def save(self) -> None:
        """Save current configuration to YAML file"""
        logger.info(f"Saving config to {self.config_path}")
        with open(self.config_path, 'w') as f:
            yaml.dump(self._config, f, default_flow_style=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-notation key (e.g., 'database.path')"""
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set config value by dot-notation key"""
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    @property
    def recorded(self) -> List[Dict[str, str]]:
        """Recording roots as a list of {'name': alias, 'path': absolute path}"""
        return [
            {'name': str(r['name']), 'path': os.path.abspath(str(r['path']))}
            for r in self.get('recorded', [])
        ]

    @property
    def thumbnail(self) -> str:
        """Thumbnail root directory"""
        return os.path.abspath(self.get('thumbnail', './thumbnail'))

    @property
    def drop_log(self) -> str:
        """Drop log root directory"""
        return os.path.abspath(self.get('drop_log', './drop_log'))

    @property
    def recorded_history_retention_days(self) -> int:
        return int(self.get('recorded_history_retention_days', DEFAULT_HISTORY_RETENTION_DAYS))

    @property
    def database_path(self) -> Path:
        """Get database path from environment or config"""
        return Path(os.getenv('PVR_DATABASE_PATH', self.get('database.path', './data/recorded.db')))

    def get_recorded_path(self, name: str) -> Optional[str]:
        """Get the absolute path of a recording root by alias"""
        for r in self.recorded:
            if r['name'] == name:
                return r['path']
        return None

    def _validate_recorded(self) -> None:
        """Recording roots need a name and a path, and names must be unique"""
        seen = set()
        for r in self.get('recorded', []):
            if not isinstance(r, dict) or not r.get('name') or not r.get('path'):
                raise ValueError(f"Invalid recorded entry in {self.config_path}: {r}")
            if r['name'] in seen:
                raise ValueError(f"Duplicate recorded name in {self.config_path}: {r['name']}")
            seen.add(r['name'])


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global config instance (None forces a reload)"""
    global _config
    _config = config
