"""Tari CLI - scaffold Tari template projects from git-hosted template repositories."""

from tari_cli.models.template import Template, TemplateDescriptor
from tari_cli.tari import Tari

__version__ = "0.1.0"
__all__ = ["Tari", "Template", "TemplateDescriptor"]
