"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigError(Exception):
    """Configuration error."""

    pass


class ClientConfig(BaseModel):
    """Root configuration model.

    ``socket`` bypasses discovery entirely when set; otherwise the socket is
    read from ``project/target/active.json`` under ``project_dir``.
    """

    socket: Path | None = None
    project_dir: Path = Path(".")
    log_level: LogLevel = "WARNING"
    rich_logging: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("socket", "project_dir", mode="after")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return value.expanduser()
