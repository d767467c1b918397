"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sbtc.config.models import ClientConfig, ConfigError
from sbtc.config.paths import get_config_path

logger = logging.getLogger(__name__)

SOCKET_ENV = "SBTC_SOCKET"
LOG_LEVEL_ENV = "SBTC_LOG_LEVEL"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("sbtc.toml"),  # Current directory
        get_config_path(),  # ~/.sbtc/config.toml (or SBTC_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Let environment variables win over file values."""
    if socket_path := os.environ.get(SOCKET_ENV):
        config["socket"] = socket_path
    if log_level := os.environ.get(LOG_LEVEL_ENV):
        config["log_level"] = log_level
    return config


def load_config(path: Path | None = None) -> ClientConfig:
    """Load configuration from a TOML file.

    Unlike an explicit path, the default locations are optional: when none
    of them exist the defaults (plus environment overrides) are used.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated ClientConfig instance.

    Raises:
        FileNotFoundError: If an explicit config file does not exist.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    try:
        return ClientConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
