"""
Configuration Manager for stime

Loads optional user settings that change the command line defaults.
Settings come from built-in defaults, then a JSON or YAML file in the
config directory, then STIME_<SECTION>_<KEY> environment variables.

Python 3.9+ compatible.
"""

import json
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple, Union

import yaml

CONFIG_NAME = "stime"
CONFIG_DIR_ENV = "STIME_CONFIG_DIR"
ENV_PREFIX = "STIME_"


class ConfigManager:
    """
    Configuration for a stime run.

    A missing or unreadable config file is not an error; defaults apply.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Optional custom config directory path
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        elif os.environ.get(CONFIG_DIR_ENV):
            self.config_dir = Path(os.environ[CONFIG_DIR_ENV])
        else:
            self.config_dir = Path.home() / ".config" / CONFIG_NAME

        self._config: Optional[Dict[str, Any]] = None
        self._defaults = self._load_default_config()
        # Held until logging is configured, see report_load_messages()
        self.load_messages: List[Tuple[int, str]] = []

        self.logger = logging.getLogger(__name__)

    def _load_default_config(self) -> Dict[str, Any]:
        """Load default configuration values."""
        return {
            "defaults": {
                "from_format": "slurm",
                "to_format": "raw",
                "duration": False,
                "reals": False
            },
            "slurm": {
                "time_format": None
            }
        }

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration with caching.

        Returns:
            Configuration dictionary
        """
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        for extension in ['.json', '.yaml', '.yml']:
            config_path = self.config_dir / f"{CONFIG_NAME}{extension}"

            if not config_path.is_file():
                continue

            try:
                if extension == '.json':
                    config_data = self._load_json(config_path)
                else:
                    config_data = self._load_yaml(config_path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                self.load_messages.append((logging.WARNING, f"Ignoring config {config_path}: {e}"))
                continue

            if not isinstance(config_data, dict):
                self.load_messages.append((logging.WARNING,
                                           f"Ignoring config {config_path}: top level is not a mapping"))
                config_data = {}
                continue

            self.load_messages.append((logging.INFO, f"Loaded configuration from {config_path}"))
            break

        config_data = self._deep_merge(self._defaults, config_data)
        config_data = self._apply_env_overrides(config_data)

        self._config = config_data
        return config_data

    def report_load_messages(self) -> None:
        """Log what happened while loading the config file."""
        self.load_config()
        for level, message in self.load_messages:
            self.logger.log(level, message)
        self.load_messages.clear()

    def _load_json(self, path: Path) -> Dict[str, Any]:
        """Load JSON configuration file."""
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML configuration file."""
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def _deep_merge(self, default: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = default.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply STIME_<SECTION>_<KEY> environment variable overrides."""
        for env_var, value in os.environ.items():
            if not env_var.startswith(ENV_PREFIX) or env_var == CONFIG_DIR_ENV:
                continue

            # Section names have no underscores; keys may
            section, _, key = env_var[len(ENV_PREFIX):].lower().partition('_')
            if not section or not key:
                continue

            current = config.get(section)
            config[section] = dict(current) if isinstance(current, dict) else {}
            config[section][key] = self._convert_env_value(value)

        return config

    def _convert_env_value(self, value: str) -> Union[str, int, bool, float]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ['true', 'yes']:
            return True
        elif value.lower() in ['false', 'no']:
            return False

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            pass

        return value

    def get(self, key: Optional[str] = None, default: Any = None) -> Any:
        """
        Get configuration value with optional key path.

        Args:
            key: Optional dot-separated key path (e.g., "defaults.from_format")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        config = self.load_config()

        if key is None:
            return config

        current = config
        for key_part in key.split('.'):
            if isinstance(current, dict) and key_part in current:
                current = current[key_part]
            else:
                return default

        return current
