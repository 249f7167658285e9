"""Template descriptor and catalog entry models."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def to_snake_case(value: str) -> str:
    """Normalize to snake_case: "Basic Project" and "BasicProject" become "basic_project"."""
    spaced = _CAMEL_BOUNDARY.sub("_", value.strip())
    return _NON_ALNUM.sub("_", spaced).strip("_").lower()


def derive_template_id(name: str) -> str:
    """Normalize a template name into its lookup id."""
    return to_snake_case(name)


class TemplateDescriptor(BaseModel):
    """Parsed content of a template descriptor file."""

    name: str = Field(..., description="Display name of the template")
    description: str = Field(..., description="Short description shown on selection")
    extra: dict[str, str] = Field(
        default_factory=dict, description="Free-form settings passed to generation"
    )

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("name", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class Template(BaseModel):
    """A discovered template: a descriptor bound to its directory."""

    id: str = Field(..., description="Lookup key derived from the name")
    name: str
    description: str
    path: Path = Field(..., description="Directory containing the descriptor file")
    extra: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_descriptor(cls, descriptor: TemplateDescriptor, path: Path) -> "Template":
        return cls(
            id=derive_template_id(descriptor.name),
            name=descriptor.name,
            description=descriptor.description,
            path=path,
            extra=dict(descriptor.extra),
        )

    def __str__(self) -> str:
        return f"{self.name} - {self.description}"


class SkippedDescriptor(BaseModel):
    """A descriptor file rejected during a collection pass."""

    path: Path
    reason: str
