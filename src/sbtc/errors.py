"""Error types raised by the sbt client.

Every error carries a human-readable description of the operation that
failed, followed by the underlying cause. Nothing is retried: the first
error aborts the session and is rendered once by the CLI.
"""

from typing import Self


class SbtClientError(Exception):
    """Base class for all client failures."""

    @classmethod
    def wrap(cls, message: str, cause: BaseException | str) -> Self:
        """Build an error whose text is ``"<message>. Details: <cause>"``."""
        return cls(f"{message}. Details: {cause}")

    @property
    def message(self) -> str:
        return str(self)


class ConnectError(SbtClientError):
    """The channel to the server could not be opened."""


class DiscoveryError(ConnectError):
    """The server socket could not be located for a project."""


class TransportIOError(SbtClientError):
    """A read or write failed mid-session."""


class EndOfStreamError(TransportIOError):
    """The server closed the connection."""


class FramingError(SbtClientError):
    """Frame headers were incomplete or had no usable Content-Length."""


class EncodingError(SbtClientError):
    """Bytes on the wire were not valid UTF-8."""


class DecodeError(SbtClientError):
    """A payload did not match any known message shape."""


class SerializationError(SbtClientError):
    """The outbound command could not be rendered to JSON."""
