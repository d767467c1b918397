"""Locate a running sbt server for a project.

While a server is running, sbt writes ``project/target/active.json`` in
the build root::

    {"uri": "local:///home/me/.sbt/1.0/server/0123abcd/sock"}

Only ``local://`` (Unix domain socket) URIs are supported.
"""

import json
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict, ValidationError

from sbtc.errors import DiscoveryError

logger = logging.getLogger(__name__)

LOCAL_SCHEME = "local"


class ActiveFile(BaseModel):
    """Contents of ``project/target/active.json``."""

    model_config = ConfigDict(extra="ignore")

    uri: str


def is_sbt_project(project_dir: Path) -> bool:
    """Check that ``project_dir`` looks like an sbt build root."""
    return (project_dir / "project").is_dir()


def active_file_path(project_dir: Path) -> Path:
    return project_dir / "project" / "target" / "active.json"


def read_active_file(path: Path) -> ActiveFile:
    """Parse an active.json file.

    Raises:
        DiscoveryError: If the file is missing or malformed.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DiscoveryError(
            f"No running sbt server found ({path} does not exist)"
        ) from e
    except OSError as e:
        raise DiscoveryError.wrap(f"Failed to read {path}", e) from e

    try:
        return ActiveFile.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise DiscoveryError.wrap(f"Failed to parse {path}", e) from e


def socket_path_from_uri(uri: str) -> Path:
    """Convert a ``local://`` server URI to a socket path.

    Raises:
        DiscoveryError: For any other scheme or a relative path.
    """
    parsed = urlparse(uri)
    if parsed.scheme != LOCAL_SCHEME:
        raise DiscoveryError(
            f"Unsupported server URI '{uri}': only {LOCAL_SCHEME}:// sockets are supported"
        )
    path = unquote(parsed.netloc + parsed.path)
    if not path.startswith("/"):
        raise DiscoveryError(f"Server URI '{uri}' has no absolute socket path")
    return Path(path)


def discover_socket(project_dir: Path) -> Path:
    """Find the server socket for the sbt project at ``project_dir``."""
    project_dir = project_dir.expanduser()
    if not is_sbt_project(project_dir):
        raise DiscoveryError(
            f"{project_dir.resolve()} is not an sbt project (no 'project' directory)"
        )

    active = read_active_file(active_file_path(project_dir))
    socket_path = socket_path_from_uri(active.uri)
    logger.info("Discovered sbt server at %s", socket_path)
    return socket_path
