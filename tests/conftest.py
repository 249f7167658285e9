"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from tests.helpers import RemoteRepo, create_remote_repo


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def remote_repo(temp_dir: Path) -> RemoteRepo:
    """Local bare template repository with `main` and `feature` branches."""
    return create_remote_repo(temp_dir)


@pytest.fixture
def base_dir(temp_dir: Path) -> Path:
    """Isolated CLI base directory holding the template mirrors."""
    path = temp_dir / "base"
    path.mkdir()
    return path
