"""Template repository configuration model."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from tari_cli.errors import ConfigError

TEMPLATE_REPOS_FOLDER_NAME = "template_repositories"

_URL_SEPARATORS = re.compile(r"[/:]")


class SyncState(str, Enum):
    """Terminal state of a repository after a sync."""

    CLONED = "cloned"  # Mirror was absent and has been cloned
    UPDATED = "updated"  # Mirror was on the requested branch and fast-forwarded
    SWITCHED = "switched"  # Mirror was on another branch and has been switched


def _split_owner_and_name(url: str) -> tuple[str, str] | None:
    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[: -len(".git")]
    parts = [part for part in _URL_SEPARATORS.split(url) if part]
    if len(parts) < 2:
        return None
    return parts[-2], parts[-1]


class TemplateRepository(BaseModel):
    """Remote git repository that holds templates."""

    url: str = Field(..., description="Git remote URL")
    branch: str = Field(default="main")
    folder: str = Field(..., description="Sub-folder of the repository holding the templates")

    model_config = {"frozen": True}

    @field_validator("url")
    @classmethod
    def _has_owner_and_name(cls, value: str) -> str:
        if _split_owner_and_name(value) is None:
            raise ValueError(f"Failed to get repository owner and name from URL: {value}")
        return value

    @property
    def owner_and_name(self) -> tuple[str, str]:
        """Get the (owner, repository name) pair from the URL."""
        parts = _split_owner_and_name(self.url)
        if parts is None:
            raise ConfigError(f"Failed to get repository owner and name from URL: {self.url}")
        return parts

    def mirror_path(self, base_dir: Path) -> Path:
        """Get the local mirror location for this repository below base_dir."""
        owner, name = self.owner_and_name
        return base_dir / TEMPLATE_REPOS_FOLDER_NAME / owner / name
