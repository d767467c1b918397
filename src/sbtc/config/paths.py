"""Path management for sbtc.

User-level state lives under a single base directory, overridable with the
SBTC_HOME environment variable.

Default locations:
- Linux/macOS: ~/.sbtc
"""

import os
from pathlib import Path

ENV_VAR = "SBTC_HOME"


def get_sbtc_home() -> Path:
    """Get the base directory for sbtc user state.

    Resolution order:
    1. SBTC_HOME environment variable (if set)
    2. ~/.sbtc
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".sbtc"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_sbtc_home() / "config.toml"
