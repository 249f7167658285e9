"""Git repository handling for template mirrors."""

from tari_cli.git.repository import GitRepository, find_git_root
from tari_cli.git.synchronizer import SyncResult, sync, sync_repositories

__all__ = ["GitRepository", "SyncResult", "find_git_root", "sync", "sync_repositories"]
