"""Configuration module."""

from autoshutdown.config.loader import find_config_path, get_default_config, load_config
from autoshutdown.config.models import (
    AutoShutdownConfig,
    Config,
    ConfigError,
    LoggingConfig,
    PreAnnounceConfig,
)
from autoshutdown.config.paths import (
    get_autoshutdown_home,
    get_config_path,
    get_logs_path,
)

__all__ = [
    "AutoShutdownConfig",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "PreAnnounceConfig",
    "find_config_path",
    "get_autoshutdown_home",
    "get_config_path",
    "get_default_config",
    "get_logs_path",
    "load_config",
]
