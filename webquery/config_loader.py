"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration with environment variable override support.

Features:
    - Single YAML file per process (config/config.yaml by default)
    - Environment variable override (WEB_TIMEOUT_IN_SECONDS overrides
      web.timeout_in_seconds)
    - Dot notation path access with defaults
    - Type coercion of environment strings against the default's type

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Environment variable naming the config file to load
CONFIG_PATH_ENV = "WEBQUERY_CONFIG"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (WEB_HOST)
        2. YAML configuration file
        3. Default values passed to get()

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("web.timeout_in_seconds", 10)
        10
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file. Falls back to
                $WEBQUERY_CONFIG, then DEFAULT_CONFIG_PATH.
        """
        if getattr(self, "_initialized", False):
            return

        env_path = os.environ.get(CONFIG_PATH_ENV)
        self._config_path = Path(config_path or env_path or DEFAULT_CONFIG_PATH)
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "web.host")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section (empty dict if missing)."""
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        # Environment variables are always strings
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next ConfigLoader() reloads from scratch."""
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
