"""Configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from autoshutdown.config.models import Config, ConfigError
from autoshutdown.config.paths import get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("autoshutdown.toml"),  # Current directory
        get_config_path(),  # ~/.autoshutdown/config.toml (or AUTOSHUTDOWN_HOME)
        Path("/etc/autoshutdown/config.toml"),  # System-wide
    ]


def find_config_path(path: Path | None = None) -> Path:
    """Resolve the config file to load.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Raises:
        ConfigError: If no config file is found.
    """
    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return config_path

    for default_path in default_paths:
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded

    raise ConfigError(
        f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
    )


def load_config(path: Path | None = None) -> Config:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or fails validation.
    """
    config_path = find_config_path(path)

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        return Config.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def get_default_config() -> Config:
    """Get a default configuration (module disabled)."""
    return Config()
