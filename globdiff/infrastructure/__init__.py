"""globdiff Infrastructure Layer.

Services used by the pattern engine, the diff engine and the CLI:
- ConfigManager: Layered YAML/environment/runtime configuration
- Logger: Structured logging system
"""

from .config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    ConfigValue,
    get_config_manager,
    set_global_config,
)
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigValue",
    "ConfigError",
    "ConfigManager",
    "get_config_manager",
    "set_global_config",
]
