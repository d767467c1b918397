"""Blocking Unix socket transport to a running sbt server.

The connection is a plain ordered byte stream with no read timeout: every
read suspends the caller until data arrives or the server hangs up. There
is no buffering or peeking, which is why the frame reader pulls header
bytes one at a time.
"""

from __future__ import annotations

import logging
import socket
from pathlib import Path
from types import TracebackType

from sbtc.errors import ConnectError, EndOfStreamError, TransportIOError

logger = logging.getLogger(__name__)


class Connection:
    """An open stream socket to exactly one server.

    Usage::

        with Connection.connect(path) as conn:
            conn.write(frame)
            first = conn.read_byte()
            body = conn.read_exact(42)
    """

    def __init__(self, sock: socket.socket, address: str = "") -> None:
        self._sock = sock
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    @classmethod
    def connect(cls, path: Path | str) -> Connection:
        """Open a Unix domain socket connection to ``path``.

        Raises:
            ConnectError: If the socket cannot be opened.
        """
        address = str(path)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(address)
            sock.settimeout(None)
        except OSError as e:
            sock.close()
            raise ConnectError.wrap("Failed to connect to Unix socket", e) from e
        logger.debug("Connected to %s", address)
        return cls(sock, address)

    def write(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise TransportIOError.wrap("Failed to write to Unix socket", e) from e

    def read_byte(self) -> int:
        """Read a single byte, blocking until one is available.

        Raises:
            EndOfStreamError: If the server closed the connection.
            TransportIOError: If the read fails.
        """
        try:
            chunk = self._sock.recv(1)
        except OSError as e:
            raise TransportIOError.wrap("Failed to read from Unix socket", e) from e
        if not chunk:
            raise EndOfStreamError("Connection closed by server")
        return chunk[0]

    def read_exact(self, n: int) -> bytes:
        """Read exactly ``n`` bytes, handling partial reads.

        Raises:
            EndOfStreamError: If the server closes before ``n`` bytes arrive.
            TransportIOError: If a read fails or ``n`` bytes cannot be allocated.
        """
        try:
            data = bytearray(n)
        except (MemoryError, OverflowError) as e:
            raise TransportIOError.wrap(
                f"Failed to allocate {n} bytes for payload", repr(e)
            ) from e
        view = memoryview(data)
        received = 0
        while received < n:
            try:
                count = self._sock.recv_into(view[received:])
            except OSError as e:
                raise TransportIOError.wrap(
                    "Failed to read from Unix socket", e
                ) from e
            if count == 0:
                raise EndOfStreamError(
                    f"Connection closed after {received} of {n} bytes"
                )
            received += count
        return bytes(data)

    def close(self) -> None:
        try:
            self._sock.close()
        except OSError as e:
            logger.debug("Error closing socket: %s", e)
        logger.debug("Disconnected from %s", self._address)

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
