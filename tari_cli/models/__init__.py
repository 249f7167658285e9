"""Data models for the Tari CLI."""

from tari_cli.models.config import Config
from tari_cli.models.git import SyncState, TemplateRepository
from tari_cli.models.template import (
    SkippedDescriptor,
    Template,
    TemplateDescriptor,
    derive_template_id,
    to_snake_case,
)

__all__ = [
    # Configuration
    "Config",
    "TemplateRepository",
    "SyncState",
    # Templates
    "Template",
    "TemplateDescriptor",
    "SkippedDescriptor",
    "derive_template_id",
    "to_snake_case",
]
