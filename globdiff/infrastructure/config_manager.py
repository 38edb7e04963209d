#!/usr/bin/env python3
"""Layered configuration manager for globdiff.

This module provides configuration management with:
- 6-level precedence hierarchy
- YAML configuration files
- Environment variable overrides (GLOBDIFF_SECTION__KEY)
- Dot-path access and runtime updates
- Simple type-schema validation
- Thread-safe operations

Example:
    >>> config = ConfigManager()
    >>> config.load_file("globdiff.yaml")
    >>> config.get("globdiff.pattern.escape_character", default="\\\\")
"""

import copy
import os
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from globdiff.core.constants import MATCHED_CONTENT_PLACEHOLDER, ErrorCode

ENV_PREFIX = "GLOBDIFF_"
ENV_NESTING_SEPARATOR = "__"
SYSTEM_CONFIG_PATH = "/etc/globdiff/config.yaml"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    SYSTEM_CONFIG = 2
    USER_CONFIG = 3
    ENVIRONMENT = 4
    CLI_ARGS = 5
    RUNTIME = 6  # Highest precedence


@dataclass
class ConfigValue:
    """Configuration value with metadata."""

    value: Any
    source: ConfigSource
    timestamp: float = field(default_factory=time.time)


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigManager:
    """Thread-safe hierarchical configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. System config (/etc/globdiff/config.yaml, when present)
    3. User config (``--config`` files)
    4. Environment variables (GLOBDIFF_*)
    5. CLI arguments
    6. Runtime updates (highest)
    """

    DEFAULT_CONFIG = {
        "globdiff": {
            "pattern": {
                "escape_character": "\\",
                "case_insensitive": False,
                "culture_invariant": False,
            },
            "diff": {
                "placeholder": MATCHED_CONTENT_PLACEHOLDER,
                "mismatch_hints": True,
                "enhanced": True,
            },
            "logging": {
                "level": "WARNING",
                "file": None,
            },
        }
    }

    SCHEMA = {
        "globdiff": {
            "pattern": {
                "escape_character": str,
                "case_insensitive": bool,
                "culture_invariant": bool,
            },
            "diff": {
                "placeholder": str,
                "mismatch_hints": bool,
                "enhanced": bool,
            },
            "logging": {
                "level": str,
            },
        }
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        load_environment: bool = True,
        system_config_file: Optional[str] = SYSTEM_CONFIG_PATH,
    ):
        """Initialize configuration manager.

        Args:
            config_file: Optional YAML config file to load
            load_environment: Whether to read GLOBDIFF_* environment variables
            system_config_file: System-wide YAML file, skipped if it does not exist
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if system_config_file and Path(system_config_file).expanduser().is_file():
            self.load_file(system_config_file, ConfigSource.SYSTEM_CONFIG)

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        with self._lock:
            self._config[source] = config_data

    def load_dict(
        self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.RUNTIME
    ) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Sections are separated by a double underscore so keys may contain
        single underscores: GLOBDIFF_PATTERN__CASE_INSENSITIVE=true
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split(ENV_NESTING_SEPARATOR)
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
                if not isinstance(current, dict):
                    break
            else:
                current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {"globdiff": env_config}

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Args:
            value: String value from environment

        Returns:
            Parsed value (bool, int, float, or str)
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "globdiff.diff.placeholder")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                found, value = self._get_nested(self._config[source], key)
                if found:
                    return value

            return default

    def get_value(self, key: str) -> Optional[ConfigValue]:
        """Get configuration value together with the source that supplied it."""
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                found, value = self._get_nested(self._config[source], key)
                if found:
                    return ConfigValue(value=value, source=source)
            return None

    @staticmethod
    def _get_nested(config: Dict[str, Any], key: str):
        """Look up a dot path; returns a (found, value) pair.

        An explicit ``null`` counts as found so a file can clear a default
        (``file: null``).
        """
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return False, None
            current = current[part]
        return True, current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            current = self._config.setdefault(source, {})

            parts = key.split(".")
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}

            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])

            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def validate_schema(self, schema: Optional[Dict[str, Any]] = None) -> bool:
        """Validate the merged configuration against a type schema.

        Args:
            schema: Schema dictionary (defaults to SCHEMA)

        Returns:
            True if valid

        Raises:
            ConfigError: If validation fails
        """
        self._validate_dict(self.get_all(), schema or self.SCHEMA, "")
        escape = self.get("globdiff.pattern.escape_character")
        if escape is not None and len(escape) != 1:
            raise ConfigError(
                f"Expected a single character for globdiff.pattern.escape_character, got {escape!r}"
            )
        return True

    def _validate_dict(self, config: Dict[str, Any], schema: Dict[str, Any], prefix: str) -> None:
        for key, expected_type in schema.items():
            if key not in config or config[key] is None:
                continue  # Optional fields

            value = config[key]
            path = f"{prefix}{key}"

            if isinstance(expected_type, dict):
                if not isinstance(value, dict):
                    raise ConfigError(f"Expected dict for {path}, got {type(value).__name__}")
                self._validate_dict(value, expected_type, f"{path}.")
            elif not isinstance(value, expected_type):
                raise ConfigError(
                    f"Expected {expected_type.__name__} for {path}, got {type(value).__name__}"
                )

    def clear(self, source: Optional[ConfigSource] = None) -> None:
        """Clear configuration.

        Args:
            source: Specific source to clear, or None for all except defaults
        """
        with self._lock:
            if source:
                if source in self._config and source != ConfigSource.COMPILED_DEFAULTS:
                    del self._config[source]
            else:
                for s in [s for s in self._config if s != ConfigSource.COMPILED_DEFAULTS]:
                    del self._config[s]


# Global config manager instance
_global_config: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigManager:
    """Get or create global configuration manager.

    Args:
        config_file: Optional config file to load on first creation

    Returns:
        Global configuration manager
    """
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager(config_file)
    return _global_config


def set_global_config(config: Optional[ConfigManager]) -> None:
    """Set (or reset with None) the global configuration manager."""
    global _global_config
    _global_config = config
