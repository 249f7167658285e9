"""Async subprocess helper shared by git and generator wrappers."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


async def run_command(
    cmd: list[str], cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    """Run a command asynchronously, raising CalledProcessError on failure."""
    logger.debug(f"Running {' '.join(cmd)} (cwd={cwd})")
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        raise subprocess.CalledProcessError(
            process.returncode, cmd, stdout.decode(), stderr.decode()
        )

    return subprocess.CompletedProcess(
        cmd, process.returncode, stdout.decode(), stderr.decode()
    )


def describe_failure(error: subprocess.CalledProcessError | OSError) -> str:
    """Best human-readable cause of a failed command."""
    if isinstance(error, subprocess.CalledProcessError):
        output = (error.stderr or error.stdout or "").strip()
        return output or f"exit status {error.returncode}"
    return str(error)
