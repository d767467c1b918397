"""Terminal rendering of server messages."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.text import Text

from sbtc.protocol.messages import Diagnostic, InboundMessage, LogMessage, Response

logger = logging.getLogger(__name__)

# Shared console instance for all CLI output
console = Console(highlight=False, soft_wrap=True)

LOG_LEVEL_STYLES: dict[int, tuple[str, str]] = {
    1: ("red", "error"),
    2: ("yellow", "warning"),
}
DEFAULT_LOG_STYLE = ("white", "info")


def render_log(level: int, message: str) -> None:
    """Print ``[label] message`` with the label coloured by severity."""
    style, label = LOG_LEVEL_STYLES.get(level, DEFAULT_LOG_STYLE)
    console.print(Text.assemble("[", (label, style), "] ", message))


def render_response(status: str, exit_code: int) -> None:
    console.print(Text.assemble("[success] ", (status, "green")))


def render_message(message: InboundMessage) -> None:
    """Render one decoded server message."""
    match message:
        case LogMessage():
            render_log(message.level, message.text)
        case Response():
            render_response(message.status, message.exit_code)
        case Diagnostic():
            logger.debug(
                "%d diagnostic(s) for %s",
                len(message.params.diagnostics),
                message.params.uri,
            )


def error(msg: str) -> None:
    """Print a single failure line."""
    render_log(1, msg)
