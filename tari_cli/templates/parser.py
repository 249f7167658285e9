"""Template descriptor file parsing."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from tari_cli.errors import ParseError
from tari_cli.models.template import TemplateDescriptor

TEMPLATE_DESCRIPTOR_FILE_NAME = "template.toml"


def parse_descriptor(content: str, path: Path | None = None) -> TemplateDescriptor:
    """Parse the TOML content of a descriptor file.

    Raises ParseError when the content is not valid TOML, when name or
    description is missing or empty, or when extra is not a flat table of
    strings.
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"Failed to deserialize TOML: {e}", path) from e

    try:
        return TemplateDescriptor.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ParseError(f"Invalid template descriptor: {problems}", path) from e


def read_descriptor(path: Path) -> TemplateDescriptor:
    """Read and parse a single descriptor file."""
    try:
        content = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Descriptor is not valid UTF-8: {e}", path) from e
    return parse_descriptor(content, path)
