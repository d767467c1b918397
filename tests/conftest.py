"""Shared test fixtures and factories."""

import socket
import tempfile
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from sbtc.errors import EndOfStreamError
from sbtc.protocol.framing import read_frame
from sbtc.transport import Connection

# =============================================================================
# Frame helpers
# =============================================================================


def make_frame(payload: str | bytes) -> bytes:
    """Frame an inbound payload the way the sbt server does."""
    body = payload.encode("utf-8") if isinstance(payload, str) else payload
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


LOG_COMPILING = (
    '{"jsonrpc":"2.0","method":"window/logMessage",'
    '"params":{"type":3,"message":"Compiling..."}}'
)
RESPONSE_DONE = '{"jsonrpc":"2.0","id":1,"result":{"status":"done","exitCode":0}}'


# =============================================================================
# Connection Fixtures
# =============================================================================


class FakeConnection:
    """In-memory stand-in for Connection that tracks how far it was read."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = data
        self.position = 0
        self.written = bytearray()

    def read_byte(self) -> int:
        if self.position >= len(self._data):
            raise EndOfStreamError("Connection closed by server")
        value = self._data[self.position]
        self.position += 1
        return value

    def read_exact(self, n: int) -> bytes:
        end = self.position + n
        if end > len(self._data):
            read = len(self._data) - self.position
            self.position = len(self._data)
            raise EndOfStreamError(f"Connection closed after {read} of {n} bytes")
        chunk = self._data[self.position : end]
        self.position = end
        return chunk

    def write(self, data: bytes) -> None:
        self.written += data


@pytest.fixture
def fake_connection() -> Callable[..., FakeConnection]:
    """Factory for a FakeConnection preloaded with inbound frames."""

    def _make(*frames: bytes) -> FakeConnection:
        return FakeConnection(b"".join(frames))

    return _make


@pytest.fixture
def socket_dir() -> Iterator[Path]:
    """Short directory for Unix sockets (AF_UNIX paths are length-limited)."""
    with tempfile.TemporaryDirectory(prefix="sbtc-") as d:
        yield Path(d)


@dataclass
class FakeSbtServer:
    path: Path
    thread: threading.Thread
    requests: list[bytes] = field(default_factory=list)


@pytest.fixture
def sbt_server(socket_dir: Path) -> Iterator[Callable[[list[bytes]], FakeSbtServer]]:
    """Start a one-shot server that reads one request frame, then replies.

    Each reply is sent verbatim, so tests control the framing.
    """
    servers: list[FakeSbtServer] = []

    def _start(replies: list[bytes]) -> FakeSbtServer:
        path = socket_dir / f"sock{len(servers)}"
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        listener.bind(str(path))
        listener.listen(1)
        requests: list[bytes] = []

        def _worker() -> None:
            conn, _ = listener.accept()
            try:
                requests.append(read_frame(Connection(conn)))
                for reply in replies:
                    conn.sendall(reply)
            finally:
                conn.close()
                listener.close()

        thread = threading.Thread(target=_worker, daemon=True)
        thread.start()
        server = FakeSbtServer(path=path, thread=thread, requests=requests)
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.thread.join(timeout=2)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep user config and env overrides out of tests."""
    home = tmp_path / "sbtc-home"
    monkeypatch.setenv("SBTC_HOME", str(home))
    monkeypatch.delenv("SBTC_SOCKET", raising=False)
    monkeypatch.delenv("SBTC_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture(autouse=True)
def plain_console(monkeypatch: pytest.MonkeyPatch):
    """Render without ANSI styling so output can be matched as text."""
    from rich.console import Console

    console = Console(color_system=None, highlight=False, soft_wrap=True)
    monkeypatch.setattr("sbtc.cli.console.console", console)
    return console


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
