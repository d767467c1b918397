"""Wire protocol: Content-Length framing and JSON-RPC message shapes."""

from sbtc.protocol.framing import (
    encode_frame,
    extract_content_length,
    read_frame,
    read_headers,
)
from sbtc.protocol.messages import (
    Diagnostic,
    InboundMessage,
    LogMessage,
    OutboundCommand,
    Response,
    build_command,
    decode_message,
)

__all__ = [
    "Diagnostic",
    "InboundMessage",
    "LogMessage",
    "OutboundCommand",
    "Response",
    "build_command",
    "decode_message",
    "encode_frame",
    "extract_content_length",
    "read_frame",
    "read_headers",
]
