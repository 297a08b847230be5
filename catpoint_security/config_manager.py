"""Configuration management with JSON file persistence and change callbacks."""

import json
import os
from dataclasses import asdict, fields
from typing import Optional, Dict, Any, Callable, List

from .models.config import SecurityConfig
from .config.defaults import DEFAULT_CONFIG, DEFAULT_PATHS, CLASSIFIER_SETTINGS, LOG_LEVELS
from .utils import ensure_directory_exists
from .logging_config import get_logger

logger = get_logger("config_manager")

_CONFIG_FIELDS = {f.name for f in fields(SecurityConfig)}


class ConfigManager:
    """Manages system configuration with file persistence."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self._config: Optional[SecurityConfig] = None
        self._config_change_callbacks: List[Callable[[SecurityConfig], None]] = []

        self.load_config()

    def load_config(self) -> SecurityConfig:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config_dict = json.load(f)
                self._config = SecurityConfig(**config_dict)
            except (json.JSONDecodeError, TypeError) as e:
                logger.error(f"Error loading config from {self.config_path}: {e}. Using defaults.")
                self._config = SecurityConfig(**DEFAULT_CONFIG)
        else:
            self._config = SecurityConfig(**DEFAULT_CONFIG)
            self.save_config()

        return self._config

    def save_config(self) -> None:
        """Save current configuration to file."""
        if self._config is None:
            return

        ensure_directory_exists(os.path.dirname(os.path.abspath(self.config_path)))
        with open(self.config_path, 'w') as f:
            json.dump(asdict(self._config), f, indent=2)

    def get_config(self) -> SecurityConfig:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values. Unknown keys are ignored."""
        if self._config is None:
            self.load_config()

        for key, value in kwargs.items():
            if key in _CONFIG_FIELDS:
                setattr(self._config, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        self.save_config()
        self._notify_callbacks()

    def validate_config(self) -> bool:
        """Validate current configuration."""
        if self._config is None:
            return False

        threshold = self._config.confidence_threshold
        if (isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or
                not CLASSIFIER_SETTINGS["min_confidence_threshold"] <= threshold
                <= CLASSIFIER_SETTINGS["max_confidence_threshold"]):
            return False

        seed = self._config.classifier_seed
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
            return False

        if not isinstance(self._config.repository_path, str) or not self._config.repository_path:
            return False

        if str(self._config.log_level).upper() not in LOG_LEVELS:
            return False

        if (not isinstance(self._config.web_port, int) or
                not 1 <= self._config.web_port <= 65535):
            return False

        if not isinstance(self._config.max_upload_mb, int) or self._config.max_upload_mb < 1:
            return False

        return True

    def register_change_callback(self, callback: Callable[[SecurityConfig], None]) -> None:
        """Register a callback to be called when config changes."""
        if callback not in self._config_change_callbacks:
            self._config_change_callbacks.append(callback)

    def unregister_change_callback(self, callback: Callable[[SecurityConfig], None]) -> None:
        """Unregister a config change callback."""
        if callback in self._config_change_callbacks:
            self._config_change_callbacks.remove(callback)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = SecurityConfig(**DEFAULT_CONFIG)
        self.save_config()
        self._notify_callbacks()

    def export_config(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        if not self._config:
            return {}
        return asdict(self._config)

    def import_config(self, config_dict: Dict[str, Any]) -> bool:
        """
        Import configuration from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            True if import was successful, False otherwise
        """
        try:
            temp_config = SecurityConfig(**config_dict)
        except TypeError as e:
            logger.error(f"Error importing config: {e}")
            return False

        old_config = self._config
        self._config = temp_config

        if not self.validate_config():
            self._config = old_config
            logger.warning("Rejected imported config: validation failed")
            return False

        self.save_config()
        self._notify_callbacks()
        return True

    def _notify_callbacks(self) -> None:
        for callback in list(self._config_change_callbacks):
            try:
                callback(self._config)
            except Exception as e:
                logger.error(f"Error in config change callback: {e}", exc_info=True)
