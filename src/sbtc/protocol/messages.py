"""JSON-RPC message types exchanged with the sbt server."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from sbtc.errors import DecodeError, EncodingError, SerializationError

logger = logging.getLogger(__name__)

COMMAND_ID = 1
EXEC_METHOD = "sbt/exec"


@dataclass(frozen=True)
class OutboundCommand:
    """The single ``sbt/exec`` request sent at session start."""

    command_line: str
    id: int = COMMAND_ID
    method: str = EXEC_METHOD
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": {"commandLine": self.command_line},
        }

    def to_json(self) -> str:
        """Serialize to compact JSON text.

        Raises:
            SerializationError: If the command cannot be encoded.
        """
        try:
            return json.dumps(
                self.to_dict(), separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError) as e:
            raise SerializationError.wrap(
                "Failed to serialize command to JSON", e
            ) from e


def build_command(args: list[str]) -> OutboundCommand:
    """Build the exec command from raw command-line arguments."""
    return OutboundCommand(command_line=" ".join(args))


class _Shape(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class LogParams(_Shape):
    type: StrictInt
    message: StrictStr


class LogMessage(_Shape):
    """A ``window/logMessage`` style notification."""

    method: StrictStr
    params: LogParams

    @property
    def level(self) -> int:
        return self.params.type

    @property
    def text(self) -> str:
        return self.params.message


class ResponseResult(_Shape):
    status: StrictStr
    exit_code: StrictInt = Field(alias="exitCode")


class Response(_Shape):
    """The terminal outcome of a prior request."""

    id: StrictInt
    result: ResponseResult

    @property
    def status(self) -> str:
        return self.result.status

    @property
    def exit_code(self) -> int:
        return self.result.exit_code


class DiagnosticParams(_Shape):
    uri: StrictStr
    diagnostics: list[dict[str, Any]]


class Diagnostic(_Shape):
    """A ``textDocument/publishDiagnostics`` notification."""

    method: StrictStr
    params: DiagnosticParams


InboundMessage = Response | LogMessage | Diagnostic

# Tried in order; the first shape that validates wins.
MESSAGE_SHAPES: tuple[type[BaseModel], ...] = (Response, LogMessage, Diagnostic)


def parse_message(raw_json: str) -> InboundMessage:
    """Parse JSON text into the first matching message shape.

    Raises:
        DecodeError: If the text is not JSON or matches no known shape.
    """
    try:
        data = json.loads(raw_json)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DecodeError.wrap(
            f"Failed to deserialize message from JSON '{raw_json}'", e
        ) from e

    errors: list[str] = []
    for shape in MESSAGE_SHAPES:
        try:
            message = shape.model_validate(data)
        except ValidationError as e:
            errors.append(f"{shape.__name__}: {e.error_count()} validation error(s)")
            continue
        logger.debug("Decoded %s", shape.__name__)
        return message  # type: ignore[return-value]

    raise DecodeError.wrap(
        f"Failed to deserialize message from JSON '{raw_json}'",
        "did not match any known message shape (" + "; ".join(errors) + ")",
    )


def decode_message(payload: bytes) -> InboundMessage:
    """Decode a frame payload into an inbound message.

    Raises:
        EncodingError: If the payload is not valid UTF-8.
        DecodeError: If the payload matches no known message shape.
    """
    try:
        raw_json = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError.wrap(
            "Failed to decode message as UTF-8 string", e
        ) from e
    return parse_message(raw_json)
