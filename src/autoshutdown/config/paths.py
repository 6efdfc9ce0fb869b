"""Centralized path management for autoshutdown.

All state (config, logs) is stored under a single base directory.
The base directory can be overridden with the AUTOSHUTDOWN_HOME environment variable.

Default locations:
- Linux/macOS: ~/.autoshutdown
- Windows: %USERPROFILE%\\.autoshutdown
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "AUTOSHUTDOWN_HOME"


@lru_cache(maxsize=1)
def get_autoshutdown_home() -> Path:
    """Get the base directory for all autoshutdown data.

    Resolution order:
    1. AUTOSHUTDOWN_HOME environment variable (if set)
    2. Platform default (~/.autoshutdown)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".autoshutdown"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_autoshutdown_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_autoshutdown_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all autoshutdown paths for display."""
    return {
        "home": get_autoshutdown_home(),
        "config": get_config_path(),
        "logs": get_logs_path(),
    }
