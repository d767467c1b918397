"""Content-Length framing for the sbt server protocol.

Frame layout::

    Content-Length: <N>\\r\\n
    \\r\\n
    <N bytes of UTF-8 JSON>

The header block has no fixed size, so it is consumed one byte at a time
until the blank line. Reading stops exactly at the end of the payload and
never touches the next frame.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING

from sbtc.errors import (
    EncodingError,
    EndOfStreamError,
    FramingError,
    TransportIOError,
)

if TYPE_CHECKING:
    from sbtc.transport import Connection

logger = logging.getLogger(__name__)

HEADER_TERMINATOR = b"\r\n\r\n"
CONTENT_LENGTH_RE = re.compile(r"Content-Length: (\d+)", re.ASCII)

# The server expects the declared length to cover a trailing CRLF that
# follows the JSON text.
OUTBOUND_SUFFIX = "\r\n"


def encode_frame(text: str) -> bytes:
    """Frame an outbound JSON text for the sbt server.

    The declared length is the UTF-8 byte length of ``text`` plus the two
    bytes of the trailing CRLF.
    """
    body = text.encode("utf-8")
    header = f"Content-Length: {len(body) + len(OUTBOUND_SUFFIX)}\r\n\r\n"
    return header.encode("ascii") + body + OUTBOUND_SUFFIX.encode("ascii")


def read_headers(connection: Connection) -> str:
    """Read the header block up to and including the blank line.

    Raises:
        EndOfStreamError: If the server hung up before sending any header byte.
        FramingError: If the stream ended inside the header block.
        EncodingError: If the headers are not valid UTF-8.
        TransportIOError: If a read fails.
    """
    headers = bytearray()
    while not headers.endswith(HEADER_TERMINATOR):
        try:
            headers.append(connection.read_byte())
        except EndOfStreamError as e:
            if not headers:
                raise
            raise FramingError.wrap(
                "Connection closed before end of headers", repr(bytes(headers))
            ) from e
        except TransportIOError as e:
            raise TransportIOError.wrap(
                "Failed to read next byte of headers", e
            ) from e
    try:
        return headers.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError.wrap(
            "Failed to read headers as a UTF-8 string", e
        ) from e


def extract_content_length(headers: str) -> int:
    """Return the first ``Content-Length`` value found in ``headers``.

    Raises:
        FramingError: If no Content-Length header is present, or its value
            does not fit in a native size.
    """
    match = CONTENT_LENGTH_RE.search(headers)
    if match is None:
        raise FramingError("Failed to extract content length from headers")
    digits = match.group(1)
    try:
        content_length = int(digits)
    except ValueError as e:
        raise FramingError.wrap(
            "Failed to extract content length from headers", e
        ) from e
    if content_length > sys.maxsize:
        raise FramingError.wrap(
            "Failed to extract content length from headers",
            f"{digits} exceeds the maximum size {sys.maxsize}",
        )
    return content_length


def read_frame(connection: Connection) -> bytes:
    """Read one complete frame and return its payload bytes.

    The declared length is trusted as-is.
    """
    headers = read_headers(connection)
    content_length = extract_content_length(headers)
    logger.debug("Reading frame payload of %d bytes", content_length)
    try:
        return connection.read_exact(content_length)
    except TransportIOError as e:
        raise TransportIOError.wrap(
            "Failed to read bytes from Unix socket", e
        ) from e
