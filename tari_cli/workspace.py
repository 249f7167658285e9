"""Cargo workspace manifest updates."""

from __future__ import annotations

import logging
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from tari_cli.errors import ManifestError

logger = logging.getLogger(__name__)

CARGO_MANIFEST_FILE_NAME = "Cargo.toml"
DEFAULT_WORKSPACE_RESOLVER = "2"


def add_workspace_member(manifest_path: Path, member: str) -> bool:
    """Register member in the [workspace] members of a Cargo manifest.

    A manifest without a [workspace] table gets a new one. Existing
    formatting and comments are preserved. Returns False when member was
    already listed.
    """
    try:
        document = tomlkit.parse(manifest_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Failed to read manifest: {e}", manifest_path) from e
    except TOMLKitError as e:
        raise ManifestError(f"Failed to parse manifest: {e}", manifest_path) from e

    workspace = document.get("workspace")
    if workspace is None:
        logger.warning(
            f"Cargo toml is not a workspace. Creating a new workspace in `{manifest_path}`"
        )
        workspace = tomlkit.table()
        workspace.add("resolver", DEFAULT_WORKSPACE_RESOLVER)
        document.add("workspace", workspace)
        workspace = document["workspace"]
    elif not isinstance(workspace, dict):
        raise ManifestError("`workspace` must be a table", manifest_path)

    members = workspace.get("members")
    if members is None:
        workspace["members"] = tomlkit.array()
        members = workspace["members"]
    elif not isinstance(members, list):
        raise ManifestError("Workspace members must be an array", manifest_path)

    if member in members:
        logger.warning(f"Project `{member}` is already a member of the workspace, skipping.")
        return False

    members.append(member)
    try:
        manifest_path.write_text(tomlkit.dumps(document), encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to write manifest: {e}", manifest_path) from e
    return True
