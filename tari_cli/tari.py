"""Main Tari class - ties repository mirrors, catalogs and generation together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Literal

from tari_cli.errors import RepositoryError
from tari_cli.generate import ProjectGenerator
from tari_cli.git import GitRepository, SyncResult, find_git_root, sync_repositories
from tari_cli.models.config import Config
from tari_cli.models.git import TemplateRepository
from tari_cli.models.template import SkippedDescriptor, Template, to_snake_case
from tari_cli.templates import Collector, find_template
from tari_cli.workspace import CARGO_MANIFEST_FILE_NAME, add_workspace_member

logger = logging.getLogger(__name__)

TemplateKind = Literal["project", "wasm"]
TemplateSelector = Callable[[list[Template], str], Template]

PROJECT_TEMPLATE_EXTRA_TEMPLATES_DIR = "templates_dir"
PROJECT_TEMPLATE_EXTRA_WASM_TEMPLATES = "wasm_templates"
DEFAULT_TEMPLATES_DIR = "templates"


class Tari:
    """Main interface for scaffolding Tari template projects."""

    def __init__(
        self,
        base_dir: str | Path,
        config: Config | None = None,
        generator: ProjectGenerator | None = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.config = config or Config()
        self.generator = generator or ProjectGenerator()
        self.skipped: dict[TemplateKind, list[SkippedDescriptor]] = {}

    def repository_config(self, kind: TemplateKind) -> TemplateRepository:
        if kind == "project":
            return self.config.project_template_repository
        elif kind == "wasm":
            return self.config.wasm_template_repository
        else:
            raise ValueError(f"Unknown template kind: {kind}")

    def templates_folder(self, kind: TemplateKind) -> Path:
        """Folder inside the mirror that holds templates of the given kind."""
        repo_config = self.repository_config(kind)
        return repo_config.mirror_path(self.base_dir) / repo_config.folder

    async def refresh_repositories(self) -> dict[TemplateKind, SyncResult]:
        """Sync the project and wasm template repositories concurrently."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        kinds: list[TemplateKind] = ["project", "wasm"]
        results = await sync_repositories(
            [self.repository_config(kind) for kind in kinds], self.base_dir
        )
        return dict(zip(kinds, results))

    async def collect_templates(self, kind: TemplateKind) -> list[Template]:
        """Collect the catalog of templates of the given kind from its mirror."""
        collector = Collector(self.templates_folder(kind))
        templates = await collector.collect()
        self.skipped[kind] = collector.skipped
        return templates

    async def resolve_template(
        self,
        kind: TemplateKind,
        template_id: str | None,
        select: TemplateSelector | None,
    ) -> Template:
        templates = await self.collect_templates(kind)
        if template_id is not None or select is None:
            return find_template(templates, template_id or "")
        return select(templates, f"Select {kind} template")

    async def create_project(
        self,
        name: str,
        output: Path,
        *,
        template_id: str | None = None,
        select: TemplateSelector | None = None,
        skip_init: bool = False,
        verbose: bool = False,
    ) -> Path:
        """Create a new Tari template project workspace.

        Returns the project root.
        """
        name = to_snake_case(name)
        output = Path(output)
        template = await self.resolve_template("project", template_id, select)

        git_root = find_git_root(output)
        if git_root is not None:
            logger.warning(
                f"Creating a new project `{name}` in the git repository `{git_root}`."
                " You may want to use `tari add` instead."
            )
            project_root = git_root
        else:
            logger.info(f"Output directory `{output}` is not a git repository.")
            project_root = output / name
            project_root.mkdir(parents=True, exist_ok=True)

        await self.generator.generate(
            template.path, name, project_root, init=True, verbose=verbose
        )

        templates_dir = template.extra.get(PROJECT_TEMPLATE_EXTRA_TEMPLATES_DIR)
        if templates_dir:
            (project_root / templates_dir).mkdir(parents=True, exist_ok=True)

        wasm_templates = template.extra.get(PROJECT_TEMPLATE_EXTRA_WASM_TEMPLATES, "")
        for wasm_template_name in (part.strip() for part in wasm_templates.split(",")):
            if not wasm_template_name:
                continue
            logger.info(f"Generating WASM project: {wasm_template_name}")
            await self.add_template(
                wasm_template_name,
                project_root,
                template_id=wasm_template_name,
                verbose=verbose,
            )

        if not skip_init:
            await GitRepository(project_root).init()

        return project_root

    async def add_template(
        self,
        name: str,
        output: Path,
        *,
        template_id: str | None = None,
        select: TemplateSelector | None = None,
        verbose: bool = False,
    ) -> Path:
        """Generate a new WASM template crate.

        Inside a git repository the crate goes to the repository root, or
        its `templates` folder when one exists. When that root holds a
        Cargo.toml the crate is registered as a workspace member. Returns
        the crate directory.
        """
        name = to_snake_case(name)
        template = await self.resolve_template("wasm", template_id, select)

        git_root = find_git_root(Path(output))
        destination = git_root if git_root is not None else Path(output)
        has_templates_dir = (destination / DEFAULT_TEMPLATES_DIR).is_dir()
        if has_templates_dir:
            destination = destination / DEFAULT_TEMPLATES_DIR
        destination.mkdir(parents=True, exist_ok=True)
        logger.info(f"Output directory for the new project is `{destination}`")

        manifest = git_root / CARGO_MANIFEST_FILE_NAME if git_root is not None else None
        in_cargo_workspace = manifest is not None and manifest.is_file()
        crate_dir = await self.generator.generate(
            template.path,
            name,
            destination,
            defines={"in_cargo_workspace": str(in_cargo_workspace).lower()},
            verbose=verbose,
        )

        if in_cargo_workspace:
            member = f"{DEFAULT_TEMPLATES_DIR}/{name}" if has_templates_dir else name
            add_workspace_member(manifest, member)
        elif git_root is None:
            try:
                await GitRepository(crate_dir).init()
            except RepositoryError as e:
                logger.warning(f"Git repository already initialized: {e}")

        return crate_dir
