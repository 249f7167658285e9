"""Recursive discovery of templates below a directory."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from tari_cli.errors import CollectError, ParseError, TemplateNotFoundError
from tari_cli.models.template import SkippedDescriptor, Template, derive_template_id
from tari_cli.templates.parser import TEMPLATE_DESCRIPTOR_FILE_NAME, read_descriptor

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = frozenset({".git"})


def _list_directory(directory: Path) -> tuple[Path | None, list[Path]]:
    """Return the descriptor file (if any) and the sorted real subdirectories."""
    descriptor: Path | None = None
    subdirs: list[Path] = []
    with os.scandir(directory) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.is_dir(follow_symlinks=False):
                if entry.name not in SKIPPED_DIRECTORIES:
                    subdirs.append(Path(entry.path))
            elif entry.name == TEMPLATE_DESCRIPTOR_FILE_NAME and entry.is_file():
                descriptor = Path(entry.path)
    return descriptor, subdirs


class Collector:
    """Collects every template found below a root folder.

    Directories are walked depth-first with an explicit stack. Within one
    directory its own descriptor comes first, then subdirectories in name
    order, so the catalog order is stable for an unchanged tree. Symlinked
    directories are not followed.

    A descriptor that fails to parse is skipped and recorded in `skipped`;
    filesystem errors abort the collection with CollectError.
    """

    def __init__(self, local_folder: Path) -> None:
        self.local_folder = Path(local_folder)
        self.skipped: list[SkippedDescriptor] = []

    async def collect(self) -> list[Template]:
        """Collect and return all templates below local_folder."""
        if not self.local_folder.is_dir():
            raise CollectError("Template folder does not exist", self.local_folder)

        self.skipped = []
        templates: list[Template] = []
        visited: set[Path] = set()
        stack = [self.local_folder]

        while stack:
            directory = stack.pop()
            canonical = directory.resolve()
            if canonical in visited:
                continue
            visited.add(canonical)

            try:
                descriptor_file, subdirs = await asyncio.to_thread(_list_directory, directory)
            except OSError as e:
                raise CollectError(f"Failed to read directory: {e}", directory) from e

            if descriptor_file is not None:
                template = await self._load_template(descriptor_file)
                if template is not None:
                    templates.append(template)

            stack.extend(reversed(subdirs))

        logger.info(
            f"Collected {len(templates)} templates from {self.local_folder}"
            f" ({len(self.skipped)} skipped)"
        )
        return templates

    async def _load_template(self, descriptor_file: Path) -> Template | None:
        try:
            descriptor = await asyncio.to_thread(read_descriptor, descriptor_file)
        except ParseError as e:
            logger.warning(f"Skipping template: {e}")
            self.skipped.append(SkippedDescriptor(path=descriptor_file, reason=str(e)))
            return None
        except OSError as e:
            raise CollectError(f"Failed to read descriptor: {e}", descriptor_file) from e
        return Template.from_descriptor(descriptor, descriptor_file.parent)


async def collect(root_path: Path) -> list[Template]:
    """Collect templates below root_path."""
    return await Collector(root_path).collect()


def find_template(templates: list[Template], template_id: str) -> Template:
    """Look up a template by id or display name, ignoring case.

    Several templates may share an id; the last discovered one wins.
    """
    wanted = template_id.lower()
    normalized = derive_template_id(template_id)
    for template in reversed(templates):
        if template.id.lower() in (wanted, normalized) or template.name.lower() == wanted:
            return template
    raise TemplateNotFoundError(template_id, [template.id for template in templates])
