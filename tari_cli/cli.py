"""CLI commands for the Tari CLI."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Coroutine, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import IntPrompt
from rich.table import Table

from tari_cli.errors import ConfigError, TariCliError
from tari_cli.models.config import Config, default_base_dir, default_config_file, parse_override
from tari_cli.models.template import Template
from tari_cli.tari import Tari, TemplateKind

console = Console()

T = TypeVar("T")

COMMAND_ALIASES = {
    "new": "create",
    "generate": "add",
    "gen": "add",
}


class AliasedGroup(click.Group):
    """Group that also resolves the command aliases in COMMAND_ALIASES."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def run_step(message: str, step: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Run an async step behind a status spinner, marking success or failure."""
    try:
        with console.status(message):
            result = asyncio.run(step())
    except Exception:
        console.print(f"[red]✗[/red] {message}")
        raise
    console.print(f"[green]✓[/green] {message}")
    return result


def select_template(templates: list[Template], prompt: str) -> Template:
    """Interactively pick one template from a numbered table."""
    if not templates:
        raise click.ClickException("No templates available to select from")

    table = Table(title=prompt)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Description")
    for index, template in enumerate(templates, start=1):
        table.add_row(str(index), template.id, template.name, template.description)
    console.print(table)

    choice = IntPrompt.ask(
        prompt,
        console=console,
        choices=[str(index) for index in range(1, len(templates) + 1)],
        show_choices=False,
    )
    return templates[choice - 1]


def get_tari(ctx: click.Context) -> Tari:
    return ctx.obj["tari"]


def refresh(tari: Tari) -> None:
    run_step("Refresh template repositories", tari.refresh_repositories)


@click.group(cls=AliasedGroup)
@click.option(
    "--base-dir",
    "-b",
    type=click.Path(file_okay=False, path_type=Path),
    default=default_base_dir,
    help="Base directory, where all the CLI data will be saved",
)
@click.option(
    "--config-file",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=default_config_file,
    help="Config file location",
)
@click.option(
    "--config-override",
    "-e",
    "config_overrides",
    multiple=True,
    metavar="KEY=VALUE",
    help="Config file overrides (can repeat)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable more verbose output")
@click.version_option(package_name="tari-cli")
@click.pass_context
def main(
    ctx: click.Context,
    base_dir: Path,
    config_file: Path,
    config_overrides: tuple[str, ...],
    verbose: bool,
) -> None:
    """Tari CLI - develop and deploy Tari templates."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    base_dir.mkdir(parents=True, exist_ok=True)
    config = Config.load_or_create(config_file)
    try:
        overrides = [parse_override(text) for text in config_overrides]
        config = config.with_overrides(overrides)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="--config-override") from e

    ctx.ensure_object(dict)
    ctx.obj["tari"] = Tari(base_dir, config)
    ctx.obj["verbose"] = verbose


@main.command()
@click.pass_context
def sync(ctx: click.Context) -> None:
    """Clone or update the template repositories."""
    tari = get_tari(ctx)

    try:
        results = run_step("Refresh template repositories", tari.refresh_repositories)
    except TariCliError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="Sync Results")
    table.add_column("Templates", style="cyan")
    table.add_column("Branch", style="blue")
    table.add_column("Commit", style="yellow")
    table.add_column("State", style="green", no_wrap=True)
    table.add_column("Folder", style="dim", overflow="fold")

    for kind, result in results.items():
        table.add_row(
            kind, result.branch, result.commit[:10], result.state.value, str(result.local_folder)
        )

    console.print(table)


@main.command()
@click.option(
    "--kind",
    "-k",
    type=click.Choice(["project", "wasm"]),
    default="wasm",
    help="Which catalog to list",
)
@click.option("--no-refresh", is_flag=True, help="Use the local mirror as is")
@click.pass_context
def templates(ctx: click.Context, kind: TemplateKind, no_refresh: bool) -> None:
    """List available templates."""
    tari = get_tari(ctx)

    try:
        if not no_refresh:
            refresh(tari)
        catalog = run_step(
            f"Collecting available {kind} templates", lambda: tari.collect_templates(kind)
        )
    except TariCliError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title=f"{kind.capitalize()} templates")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Description")
    table.add_column("Path", style="dim", overflow="fold")

    for template in catalog:
        table.add_row(template.id, template.name, template.description, str(template.path))

    console.print(table)
    skipped = tari.skipped.get(kind, [])
    if skipped:
        console.print(f"[yellow]Skipped {len(skipped)} invalid template descriptors[/yellow]")
        for entry in skipped:
            console.print(f"[dim]  {entry.reason}[/dim]")


@main.command()
@click.argument("name")
@click.option("--template", "-t", default=None, help="Project template ID (prompted if not set)")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path.cwd,
    help="Directory where the new project will be output",
)
@click.option("--skip-init", is_flag=True, help="Skip git init")
@click.pass_context
def create(
    ctx: click.Context, name: str, template: str | None, output: Path, skip_init: bool
) -> None:
    """Create a new workspace for a Tari template project."""
    tari = get_tari(ctx)

    try:
        refresh(tari)
        project_root = asyncio.run(
            tari.create_project(
                name,
                output,
                template_id=template,
                select=select_template,
                skip_init=skip_init,
                verbose=ctx.obj["verbose"],
            )
        )
    except TariCliError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]Created project in {project_root}[/green]")


@main.command()
@click.argument("name")
@click.option("--template", "-t", default=None, help="WASM template ID (prompted if not set)")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path.cwd,
    help="Directory where the new crate will be output",
)
@click.pass_context
def add(ctx: click.Context, name: str, template: str | None, output: Path) -> None:
    """Generate a new Tari WASM template crate.

    Inside a git repository with a Cargo.toml at its root the crate is added
    to the workspace members. Use `create` to start a new project.
    """
    tari = get_tari(ctx)

    try:
        refresh(tari)
        crate_dir = asyncio.run(
            tari.add_template(
                name,
                output,
                template_id=template,
                select=select_template,
                verbose=ctx.obj["verbose"],
            )
        )
    except TariCliError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]Generated {crate_dir}[/green]")


if __name__ == "__main__":
    main()
