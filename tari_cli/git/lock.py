"""Advisory per-repository file lock."""

from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import IO, AsyncIterator

LOCK_SUFFIX = ".lock"


def lock_path_for(local_folder: Path) -> Path:
    """Lock file guarding a mirror; a sibling so it never dirties the working copy."""
    return local_folder.with_name(local_folder.name + LOCK_SUFFIX)


def _ensure_lock_region(f: IO[bytes]) -> None:
    """Region locks on Windows need at least one byte in the file."""
    f.seek(0, os.SEEK_END)
    if f.tell() <= 0:
        f.write(b"\0")
        f.flush()
    f.seek(0)


def _lock(fd: int) -> None:
    if os.name == "nt":
        import msvcrt  # Windows only

        msvcrt.locking(fd, msvcrt.LK_LOCK, 1)
    else:
        import fcntl  # POSIX only

        fcntl.flock(fd, fcntl.LOCK_EX)


def _unlock(fd: int) -> None:
    if os.name == "nt":
        import msvcrt  # Windows only

        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # POSIX only

        fcntl.flock(fd, fcntl.LOCK_UN)


def acquire_lockfile(path: Path) -> IO[bytes]:
    """Open and lock a lockfile. Keep the returned handle open to hold the lock."""
    path.parent.mkdir(parents=True, exist_ok=True)
    f = path.open("r+b") if path.exists() else path.open("w+b")
    try:
        _ensure_lock_region(f)
        _lock(f.fileno())
    except BaseException:
        f.close()
        raise
    return f


def release_lockfile(f: IO[bytes]) -> None:
    try:
        _unlock(f.fileno())
    finally:
        f.close()


@asynccontextmanager
async def repository_lock(local_folder: Path) -> AsyncIterator[Path]:
    """Hold an exclusive lock on local_folder for the duration of the block."""
    path = lock_path_for(local_folder)
    handle = await asyncio.to_thread(acquire_lockfile, path)
    try:
        yield path
    finally:
        release_lockfile(handle)
