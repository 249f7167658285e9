"""Keep local mirrors of template repositories up to date."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from tari_cli.git.lock import repository_lock
from tari_cli.git.repository import GitRepository
from tari_cli.models.git import SyncState, TemplateRepository

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of synchronizing one repository."""

    repository: GitRepository
    state: SyncState
    branch: str
    commit: str

    @property
    def local_folder(self) -> Path:
        return self.repository.local_folder


def _is_absent(path: Path) -> bool:
    """Absent means nothing to lose: missing, or an empty directory."""
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())


async def sync(repo_config: TemplateRepository, base_dir: Path) -> SyncResult:
    """Make the mirror of repo_config below base_dir match its remote branch.

    Clones when the mirror is absent, otherwise fetches and fast-forwards,
    switching branches first when the mirror is on a different one. A
    mirror folder that exists but is not a repository raises RepositoryError
    and is left untouched.
    """
    local_folder = repo_config.mirror_path(Path(base_dir))
    repo = GitRepository(local_folder)

    async with repository_lock(local_folder):
        if _is_absent(local_folder):
            await repo.clone_and_checkout(repo_config.url, repo_config.branch)
            state = SyncState.CLONED
        else:
            await repo.load()
            current_branch = await repo.current_branch_name()
            if current_branch != repo_config.branch:
                logger.info(
                    f"Switching {local_folder} from {current_branch} to {repo_config.branch}"
                )
                await repo.pull_changes(repo_config.branch)
                state = SyncState.SWITCHED
            else:
                await repo.pull_changes()
                state = SyncState.UPDATED

        branch = await repo.current_branch_name()
        commit = await repo.head_commit()

    logger.info(f"Synced {repo_config.url} ({branch}@{commit[:10]}): {state.value}")
    return SyncResult(repository=repo, state=state, branch=branch, commit=commit)


async def sync_repositories(
    repo_configs: list[TemplateRepository], base_dir: Path
) -> list[SyncResult]:
    """Synchronize several repositories concurrently.

    Configs that resolve to the same mirror are synchronized one after the
    other, in order.
    """
    groups: dict[Path, list[int]] = {}
    for index, repo_config in enumerate(repo_configs):
        groups.setdefault(repo_config.mirror_path(Path(base_dir)), []).append(index)

    results: list[SyncResult | None] = [None] * len(repo_configs)

    async def run_group(indices: list[int]) -> None:
        for index in indices:
            results[index] = await sync(repo_configs[index], base_dir)

    await asyncio.gather(*(run_group(indices) for indices in groups.values()))
    return [result for result in results if result is not None]
