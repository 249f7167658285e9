"""Local git working copy driven through the git executable."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from tari_cli.errors import RepositoryError, SyncError
from tari_cli.process import describe_failure, run_command

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


class GitRepository:
    """A git working copy at a fixed local folder.

    The folder is not touched on construction. One of init(), load() or
    clone_and_checkout() must succeed before the other operations are used.
    """

    def __init__(self, local_folder: Path) -> None:
        self.local_folder = Path(local_folder)
        self.is_loaded = False

    def __repr__(self) -> str:
        return f"GitRepository({str(self.local_folder)!r}, loaded={self.is_loaded})"

    async def _git(self, *args: str, cwd: Path | None = None) -> str:
        cmd = ["git", *args]
        result = await run_command(cmd, cwd=cwd or self.local_folder)
        return result.stdout.strip()

    def _require_loaded(self) -> None:
        if not self.is_loaded:
            raise RepositoryError("Git repository is not initialized", self.local_folder)

    async def init(self) -> None:
        """Initialize a new repository in the local folder."""
        self.local_folder.mkdir(parents=True, exist_ok=True)
        try:
            await self._git("init")
        except (subprocess.CalledProcessError, OSError) as e:
            raise RepositoryError(
                f"Failed to initialize repository: {describe_failure(e)}", self.local_folder
            ) from e
        self.is_loaded = True

    async def load(self) -> None:
        """Open the existing repository in the local folder."""
        if not self.local_folder.is_dir():
            raise RepositoryError("Repository folder does not exist", self.local_folder)
        try:
            toplevel = await self._git("rev-parse", "--show-toplevel")
        except subprocess.CalledProcessError as e:
            raise RepositoryError(
                f"Not a git repository: {describe_failure(e)}", self.local_folder
            ) from e
        except OSError as e:
            raise RepositoryError(f"Failed to run git: {e}", self.local_folder) from e

        if Path(toplevel).resolve() != self.local_folder.resolve():
            raise RepositoryError(
                f"Folder is inside the git repository at {toplevel}, not a repository itself",
                self.local_folder,
            )
        self.is_loaded = True

    async def clone_and_checkout(self, url: str, branch: str) -> None:
        """Clone url into the local folder with branch checked out."""
        self.local_folder.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Cloning {url} ({branch}) into {self.local_folder}")
        try:
            await self._git(
                "clone",
                "--branch",
                branch,
                url,
                str(self.local_folder),
                cwd=self.local_folder.parent,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise SyncError(f"Failed to clone {url} ({branch})", describe_failure(e)) from e
        self.is_loaded = True

    async def current_branch_name(self) -> str:
        """Name of the checked out branch."""
        self._require_loaded()
        try:
            return await self._git("symbolic-ref", "--short", "HEAD")
        except subprocess.CalledProcessError as e:
            raise RepositoryError(
                "Current reference is not a branch", self.local_folder
            ) from e

    async def head_commit(self) -> str:
        """Get the full hash of the checked out commit."""
        self._require_loaded()
        try:
            return await self._git("rev-parse", "HEAD")
        except subprocess.CalledProcessError as e:
            raise RepositoryError(
                f"Failed to resolve HEAD: {describe_failure(e)}", self.local_folder
            ) from e

    async def pull_changes(self, branch: str | None = None) -> None:
        """Fetch branch (default: the current one) and force-checkout its remote tip.

        A local branch is created when it does not exist yet. Local
        modifications to tracked files are discarded.
        """
        self._require_loaded()
        target = branch if branch is not None else await self.current_branch_name()
        remote_ref = f"refs/remotes/{REMOTE_NAME}/{target}"

        logger.info(f"Pulling {REMOTE_NAME}/{target} into {self.local_folder}")
        try:
            await self._git(
                "fetch", "--tags", REMOTE_NAME, f"+refs/heads/{target}:{remote_ref}"
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise SyncError(
                f"Failed to fetch branch {target} of {self.local_folder}", describe_failure(e)
            ) from e

        try:
            await self._git("checkout", "--force", "-B", target, remote_ref)
            await self._git("branch", f"--set-upstream-to={REMOTE_NAME}/{target}", target)
        except (subprocess.CalledProcessError, OSError) as e:
            raise SyncError(
                f"Failed to check out branch {target} in {self.local_folder}",
                describe_failure(e),
            ) from e


def find_git_root(path: Path) -> Path | None:
    """Find the closest directory at or above path that contains a .git entry."""
    current = Path(path).absolute()
    if not current.exists():
        return None
    if current.is_file():
        current = current.parent
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None
