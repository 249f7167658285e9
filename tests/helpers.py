"""Helpers for building template trees and git remotes in tests."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

from tari_cli.generate import ProjectGenerator
from tari_cli.templates import TEMPLATE_DESCRIPTOR_FILE_NAME

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not found")


def git(*args: str, cwd: Path) -> str:
    """Run a git command for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        env={**os.environ, **GIT_ENV},
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def write_descriptor(
    directory: Path,
    name: str,
    description: str,
    extra: dict[str, str] | None = None,
) -> Path:
    """Write a template descriptor file into directory, creating it."""
    directory.mkdir(parents=True, exist_ok=True)
    lines = [f'name = "{name}"', f'description = "{description}"']
    if extra:
        lines.append("")
        lines.append("[extra]")
        lines.extend(f'{key} = "{value}"' for key, value in extra.items())
    path = directory / TEMPLATE_DESCRIPTOR_FILE_NAME
    path.write_text("\n".join(lines) + "\n")
    return path


@dataclass
class RemoteRepo:
    """A bare repository acting as the remote, plus a work tree to push from."""

    url: str
    work: Path

    def commit(self, relative_path: str, content: str, branch: str = "main") -> str:
        git("checkout", branch, cwd=self.work)
        target = self.work / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        git("add", "-A", cwd=self.work)
        git("commit", "-m", f"update {relative_path}", cwd=self.work)
        git("push", "origin", branch, cwd=self.work)
        return git("rev-parse", "HEAD", cwd=self.work)

    def tip(self, branch: str) -> str:
        return git("rev-parse", f"origin/{branch}", cwd=self.work)


def create_remote_repo(root: Path) -> RemoteRepo:
    """Template repository with a `main` and a `feature` branch.

    main holds templates/basic and templates/nft; feature additionally holds
    templates/feature_only.
    """
    seed = root / "seed"
    seed.mkdir()
    git("init", cwd=seed)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=seed)
    write_descriptor(seed / "templates" / "basic", "basic", "Basic template")
    write_descriptor(seed / "templates" / "nft", "nft", "NFT template", {"category": "tokens"})
    git("add", "-A", cwd=seed)
    git("commit", "-m", "initial", cwd=seed)

    git("checkout", "-b", "feature", cwd=seed)
    write_descriptor(seed / "templates" / "feature_only", "Feature Only", "Only on feature")
    git("add", "-A", cwd=seed)
    git("commit", "-m", "feature", cwd=seed)
    git("checkout", "main", cwd=seed)

    bare = root / "remotes" / "templates.git"
    bare.parent.mkdir()
    git("clone", "--bare", str(seed), str(bare), cwd=root)

    work = root / "work"
    git("clone", str(bare), str(work), cwd=root)
    git("branch", "--track", "feature", "origin/feature", cwd=work)
    return RemoteRepo(url=str(bare), work=work)


class FakeGenerator(ProjectGenerator):
    """Generator that creates the output directory instead of running cargo."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict] = []

    async def generate(
        self,
        template_path: Path,
        name: str,
        destination: Path,
        *,
        init: bool = False,
        defines: dict[str, str] | None = None,
        verbose: bool = False,
    ) -> Path:
        self.calls.append(
            {
                "template_path": template_path,
                "name": name,
                "destination": destination,
                "init": init,
                "defines": defines or {},
            }
        )
        project_dir = destination if init else destination / name
        project_dir.mkdir(parents=True, exist_ok=True)
        return project_dir
