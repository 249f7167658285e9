"""Template descriptor parsing and catalog collection."""

from tari_cli.templates.collector import Collector, collect, find_template
from tari_cli.templates.parser import (
    TEMPLATE_DESCRIPTOR_FILE_NAME,
    parse_descriptor,
    read_descriptor,
)

__all__ = [
    "Collector",
    "collect",
    "find_template",
    "TEMPLATE_DESCRIPTOR_FILE_NAME",
    "parse_descriptor",
    "read_descriptor",
]
