"""Project generation through cargo-generate."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Awaitable, Callable

from tari_cli.errors import GenerateError
from tari_cli.process import describe_failure, run_command

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., Awaitable[subprocess.CompletedProcess[str]]]


class ProjectGenerator:
    """Expands a template directory into a new project with `cargo generate`."""

    def __init__(self, executable: str = "cargo", runner: CommandRunner = run_command) -> None:
        self.executable = executable
        self.runner = runner

    def build_command(
        self,
        template_path: Path,
        name: str,
        destination: Path,
        *,
        init: bool = False,
        defines: dict[str, str] | None = None,
        verbose: bool = False,
    ) -> list[str]:
        cmd = [
            self.executable,
            "generate",
            "--path",
            str(template_path),
            "--name",
            name,
            "--destination",
            str(destination),
        ]
        if init:
            cmd.append("--init")
        for key, value in (defines or {}).items():
            cmd.extend(["--define", f"{key}={value}"])
        if verbose:
            cmd.append("--verbose")
        return cmd

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
        """Generate a project and return the directory it was written to.

        With init the files land directly in destination, otherwise in
        destination/name.
        """
        cmd = self.build_command(
            template_path, name, destination, init=init, defines=defines, verbose=verbose
        )
        logger.info(f"Generating {name} from {template_path} into {destination}")
        try:
            await self.runner(cmd, cwd=destination)
        except (subprocess.CalledProcessError, OSError) as e:
            raise GenerateError(
                f"Failed to generate {name} from {template_path}", describe_failure(e)
            ) from e
        return destination if init else destination / name
