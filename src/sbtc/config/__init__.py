"""Configuration module."""

from sbtc.config.loader import load_config
from sbtc.config.models import ClientConfig, ConfigError
from sbtc.config.paths import get_config_path, get_sbtc_home

__all__ = [
    "ClientConfig",
    "ConfigError",
    "get_config_path",
    "get_sbtc_home",
    "load_config",
]
