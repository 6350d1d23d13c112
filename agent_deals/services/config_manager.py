"""
Configuration management for the AgentDeals catalog.
"""

import json
import os
from typing import Any, Dict, Optional

import yaml

from ..models.config import Configuration

CONFIG_SEARCH_PATHS = [
    "config/config.yaml",
    "config/config.yml",
    "config/config.json",
    "config.yaml",
    "config.yml",
    "config.json",
]


class ConfigurationManager:
    """Manages loading, validation, and reloading of system configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, the standard
                locations are searched and defaults are used when none exists.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[Configuration] = None
        self._last_modified: Optional[float] = None

    @staticmethod
    def _find_config_file() -> Optional[str]:
        """Find the configuration file in standard locations."""
        for path in CONFIG_SEARCH_PATHS:
            if os.path.exists(path):
                return path
        return None

    def load_config(self) -> Configuration:
        """
        Load configuration from file, or defaults when there is no file.

        Returns:
            Configuration object with validated settings.

        Raises:
            ValueError: If configuration is invalid or file cannot be read.
            FileNotFoundError: If an explicit configuration file doesn't exist.
        """
        if self.config_path is None:
            config = Configuration()
            config.validate()
            self._config = config
            return config

        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            raw_config = self._read_file(self.config_path)

            # Expand environment variables
            raw_config = self._expand_env_vars(raw_config)

            config = Configuration.from_dict(raw_config)
            config.validate()

            self._config = config
            self._last_modified = os.path.getmtime(self.config_path)

            return config

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")
        except Exception as e:
            raise ValueError(f"Error loading configuration: {e}")

    @staticmethod
    def _read_file(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                raw_config = json.load(f)
            else:
                raw_config = yaml.safe_load(f)

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration root must be a mapping")
        return raw_config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand environment variables in configuration."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            # Expand ${VAR_NAME} patterns
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = os.getenv(var_name)
                if env_value is None:
                    raise ValueError(f"Environment variable '{var_name}' not found")
                return env_value
            return obj
        else:
            return obj

    def get_config(self) -> Configuration:
        """
        Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_if_changed(self) -> bool:
        """
        Reload configuration if file has been modified.

        Returns:
            True if configuration was reloaded, False otherwise.
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return False

        current_modified = os.path.getmtime(self.config_path)

        if self._last_modified is None or current_modified > self._last_modified:
            try:
                self.load_config()
                return True
            except (ValueError, OSError):
                # If reload fails, keep current config
                return False

        return False

    def get_config_template(self) -> Dict[str, Any]:
        """
        Get a template configuration dictionary.

        Returns:
            Dictionary with example configuration structure.
        """
        return {
            "data": {
                "offers_path": "data/index.json",
                "changes_path": "data/deal_changes.json",
                "snapshot_path": "data/pricing-hashes.json",
            },
            "monitor": {
                "fetch_timeout": 15,
                "user_agent": "AgentDeals-PricingMonitor/1.0",
                "max_workers": 1,
            },
            "feed": {"default_window_days": 30},
            "staleness": {"threshold_days": 30},
            "logging": {"level": "INFO", "directory": "logs"},
        }
