"""Centralized logging configuration for sbtc.

The CLI calls configure_logging() once, before connecting. Diagnostic logs
go to stderr so they never interleave with the rendered build output on
stdout.

Logging Levels:
- DEBUG: Frame sizes, decoded message variants, socket lifecycle
- INFO: Discovery and connection summaries
- WARNING: Recoverable oddities (default threshold)
- ERROR: Failures that abort the session
"""

import logging
import os

LOG_LEVEL_ENV = "SBTC_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = "WARNING"


class ComponentFormatter(logging.Formatter):
    """Formatter that names records relative to the sbtc package.

    ``sbtc.protocol.framing`` is shown as ``protocol.framing``; loggers
    outside the package keep their full name.
    """

    PREFIX = "sbtc."

    def format(self, record: logging.LogRecord) -> str:
        record.component = record.name.removeprefix(self.PREFIX)
        return super().format(record)


def resolve_level(level: str | None) -> str:
    """Resolve a log level name, falling back to SBTC_LOG_LEVEL or WARNING.

    Raises:
        ValueError: If the name is not one of LOG_LEVELS.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level {level!r}: expected one of {', '.join(LOG_LEVELS)}"
        )
    return normalized


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
) -> None:
    """Configure logging for sbtc.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses SBTC_LOG_LEVEL env var or WARNING.
        use_rich: Use Rich handler for colorful output.
    """
    log_level = getattr(logging, resolve_level(level))

    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True,
    )
