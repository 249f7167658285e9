"""Tests for the git working copy wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from tari_cli.errors import RepositoryError, SyncError
from tari_cli.git import GitRepository, find_git_root
from tests.helpers import RemoteRepo, git, requires_git

pytestmark = requires_git


class TestGitRepository:
    """Tests for GitRepository operations against a local remote."""

    @pytest.mark.asyncio
    async def test_clone_and_checkout(self, remote_repo: RemoteRepo, temp_dir: Path) -> None:
        repo = GitRepository(temp_dir / "clone")
        assert not repo.is_loaded

        await repo.clone_and_checkout(remote_repo.url, "feature")

        assert repo.is_loaded
        assert await repo.current_branch_name() == "feature"
        assert await repo.head_commit() == remote_repo.tip("feature")
        assert (temp_dir / "clone" / "templates" / "feature_only" / "template.toml").exists()

    @pytest.mark.asyncio
    async def test_clone_unknown_branch_fails(
        self, remote_repo: RemoteRepo, temp_dir: Path
    ) -> None:
        repo = GitRepository(temp_dir / "clone")

        with pytest.raises(SyncError):
            await repo.clone_and_checkout(remote_repo.url, "does-not-exist")

        assert not repo.is_loaded

    @pytest.mark.asyncio
    async def test_clone_missing_remote_fails(self, temp_dir: Path) -> None:
        repo = GitRepository(temp_dir / "clone")

        with pytest.raises(SyncError) as exc_info:
            await repo.clone_and_checkout(str(temp_dir / "nowhere.git"), "main")

        assert exc_info.value.cause

    @pytest.mark.asyncio
    async def test_load_existing(self, remote_repo: RemoteRepo) -> None:
        repo = GitRepository(remote_repo.work)

        await repo.load()

        assert repo.is_loaded
        assert await repo.current_branch_name() == "main"

    @pytest.mark.asyncio
    async def test_load_plain_directory_fails(self, temp_dir: Path) -> None:
        plain = temp_dir / "plain"
        plain.mkdir()
        (plain / "file.txt").write_text("data")

        with pytest.raises(RepositoryError):
            await GitRepository(plain).load()

        assert (plain / "file.txt").exists()

    @pytest.mark.asyncio
    async def test_load_subdirectory_of_repository_fails(self, remote_repo: RemoteRepo) -> None:
        """A folder inside someone else's working copy is not a mirror."""
        with pytest.raises(RepositoryError, match="inside the git repository"):
            await GitRepository(remote_repo.work / "templates").load()

    @pytest.mark.asyncio
    async def test_operations_require_loading(self, temp_dir: Path) -> None:
        repo = GitRepository(temp_dir)

        with pytest.raises(RepositoryError, match="not initialized"):
            await repo.current_branch_name()
        with pytest.raises(RepositoryError, match="not initialized"):
            await repo.pull_changes()

    @pytest.mark.asyncio
    async def test_detached_head_is_not_a_branch(self, remote_repo: RemoteRepo) -> None:
        git("checkout", "--detach", "HEAD", cwd=remote_repo.work)
        repo = GitRepository(remote_repo.work)
        await repo.load()

        with pytest.raises(RepositoryError, match="not a branch"):
            await repo.current_branch_name()

    @pytest.mark.asyncio
    async def test_pull_current_branch(self, remote_repo: RemoteRepo, temp_dir: Path) -> None:
        repo = GitRepository(temp_dir / "clone")
        await repo.clone_and_checkout(remote_repo.url, "main")
        new_tip = remote_repo.commit("templates/basic/README.md", "hello")

        await repo.pull_changes()

        assert await repo.head_commit() == new_tip
        assert (temp_dir / "clone" / "templates" / "basic" / "README.md").read_text() == "hello"

    @pytest.mark.asyncio
    async def test_pull_other_branch_creates_local_branch(
        self, remote_repo: RemoteRepo, temp_dir: Path
    ) -> None:
        repo = GitRepository(temp_dir / "clone")
        await repo.clone_and_checkout(remote_repo.url, "main")

        await repo.pull_changes("feature")

        assert await repo.current_branch_name() == "feature"
        assert await repo.head_commit() == remote_repo.tip("feature")
        upstream = git(
            "rev-parse", "--abbrev-ref", "feature@{upstream}", cwd=temp_dir / "clone"
        )
        assert upstream == "origin/feature"

    @pytest.mark.asyncio
    async def test_pull_unknown_branch_fails(
        self, remote_repo: RemoteRepo, temp_dir: Path
    ) -> None:
        repo = GitRepository(temp_dir / "clone")
        await repo.clone_and_checkout(remote_repo.url, "main")

        with pytest.raises(SyncError):
            await repo.pull_changes("does-not-exist")

        assert await repo.current_branch_name() == "main"

    @pytest.mark.asyncio
    async def test_init(self, temp_dir: Path) -> None:
        repo = GitRepository(temp_dir / "new-project")

        await repo.init()

        assert (temp_dir / "new-project" / ".git").is_dir()
        assert repo.is_loaded


class TestFindGitRoot:
    """Tests for find_git_root."""

    def test_finds_enclosing_root(self, remote_repo: RemoteRepo) -> None:
        nested = remote_repo.work / "templates" / "basic"

        assert find_git_root(nested) == remote_repo.work.absolute()

    def test_file_uses_parent(self, remote_repo: RemoteRepo) -> None:
        descriptor = remote_repo.work / "templates" / "basic" / "template.toml"

        assert find_git_root(descriptor) == remote_repo.work.absolute()

    def test_missing_path(self, temp_dir: Path) -> None:
        assert find_git_root(temp_dir / "missing") is None
