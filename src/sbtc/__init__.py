"""Thin client for a running sbt server.

Sends one ``sbt/exec`` command over the server's Unix socket and streams
the server's log notifications until the command's response arrives.

Environment variables:
- SBTC_SOCKET: Server socket path (skips active.json discovery)
- SBTC_LOG_LEVEL: Diagnostic log level for the client itself
- SBTC_HOME: Directory holding config.toml (default: ~/.sbtc)
"""

__version__ = "0.1.0"
