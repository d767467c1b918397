"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from sbtc.cli.console import error, render_message
from sbtc.config import ClientConfig, ConfigError, load_config
from sbtc.discovery import discover_socket
from sbtc.errors import SbtClientError
from sbtc.logging import configure_logging, resolve_level
from sbtc.protocol.messages import build_command
from sbtc.session import run_session
from sbtc.transport import Connection

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="sbtc",
    help="Run a command on an already-running sbt server.",
    add_completion=False,
)


def _resolve_socket(
    config: ClientConfig,
    socket_path: Path | None,
    project_dir: Path | None,
) -> Path:
    if socket_path is not None:
        return socket_path
    if config.socket is not None:
        return config.socket
    return discover_socket(project_dir or config.project_dir)


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return resolve_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def main(
    ctx: typer.Context,
    args: Annotated[
        list[str] | None,
        typer.Argument(
            help="sbt command line, e.g. 'compile' or 'testOnly -- -z foo'",
            show_default=False,
        ),
    ] = None,
    socket_path: Annotated[
        Path | None,
        typer.Option(
            "--socket",
            "-s",
            help="Server socket path (skips active.json discovery)",
        ),
    ] = None,
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            "-C",
            help="sbt build root (default: current directory)",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Diagnostic log level: DEBUG, INFO, WARNING, ERROR",
            callback=_validate_log_level,
        ),
    ] = None,
) -> None:
    """Send ARGS to the sbt server and stream its output until it finishes."""
    command_args = list(args or []) + list(ctx.args)
    if not command_args:
        typer.echo(ctx.get_help())
        raise typer.Exit(1)

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None

    configure_logging(log_level or config.log_level, use_rich=config.rich_logging)

    command = build_command(command_args)
    try:
        socket = _resolve_socket(config, socket_path, project_dir)
        with Connection.connect(socket) as connection:
            run_session(connection, command, render_message)
    except SbtClientError as e:
        logger.debug("Session aborted: %s", e, exc_info=True)
        error(e.message)
        raise typer.Exit(1) from None


if __name__ == "__main__":
    app()
