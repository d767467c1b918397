"""Session loop: send one exec command, then consume messages until done.

The loop has two states. It starts in AWAITING_TERMINAL and moves to DONE
only when a Response carrying the command's own id arrives. Log and
diagnostic notifications, and responses to other ids, are rendered and
the loop keeps reading. Any error aborts the session immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from sbtc.errors import TransportIOError
from sbtc.protocol.framing import encode_frame, read_frame
from sbtc.protocol.messages import (
    InboundMessage,
    OutboundCommand,
    Response,
    decode_message,
)

if TYPE_CHECKING:
    from sbtc.transport import Connection

logger = logging.getLogger(__name__)

MessageHandler = Callable[[InboundMessage], None]


class SessionState(Enum):
    AWAITING_TERMINAL = "awaiting_terminal"
    DONE = "done"


class Session:
    """One command's conversation with the server over an owned connection."""

    def __init__(
        self,
        connection: Connection,
        command: OutboundCommand,
        on_message: MessageHandler,
    ) -> None:
        self.connection = connection
        self.command = command
        self.on_message = on_message
        self.state = SessionState.AWAITING_TERMINAL

    @property
    def done(self) -> bool:
        return self.state is SessionState.DONE

    def send_command(self) -> None:
        frame = encode_frame(self.command.to_json())
        try:
            self.connection.write(frame)
        except TransportIOError as e:
            raise TransportIOError.wrap(
                "Failed to write command to Unix socket", e
            ) from e
        logger.debug("Sent %s: %r", self.command.method, self.command.command_line)

    def is_terminal(self, message: InboundMessage) -> bool:
        return isinstance(message, Response) and message.id == self.command.id

    def process_next_message(self) -> bool:
        """Receive, decode and dispatch the next message.

        Returns True if it was the response to our command, meaning the
        session is done.
        """
        payload = read_frame(self.connection)
        message = decode_message(payload)
        self.on_message(message)
        if self.is_terminal(message):
            self.state = SessionState.DONE
        return self.done

    def run(self) -> None:
        self.send_command()
        while not self.process_next_message():
            pass
        logger.debug("Session complete")


def run_session(
    connection: Connection,
    command: OutboundCommand,
    on_message: MessageHandler,
) -> None:
    """Run a full session for ``command`` on ``connection``."""
    Session(connection, command, on_message).run()
