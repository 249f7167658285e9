"""Error types raised by the Tari CLI."""

from __future__ import annotations

from pathlib import Path


class TariCliError(Exception):
    """Base class for all errors surfaced to the command line."""


class ParseError(TariCliError):
    """A template descriptor is malformed or incomplete."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class SyncError(TariCliError):
    """Cloning, fetching or switching branches of a template repository failed."""

    def __init__(self, message: str, cause: str | None = None) -> None:
        self.cause = cause
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class RepositoryError(TariCliError):
    """A local path exists but is not a usable git repository."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message} ({path})")


class CollectError(TariCliError):
    """Walking a template directory tree failed at the filesystem level."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message} ({path})")


class GenerateError(TariCliError):
    """The external project generator failed."""

    def __init__(self, message: str, output: str = "") -> None:
        self.output = output
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class TemplateNotFoundError(TariCliError):
    """No template in the catalog matches the requested id."""

    def __init__(self, template_id: str, available: list[str]) -> None:
        self.template_id = template_id
        self.available = available
        super().__init__(
            f"Template not found by name: {template_id}. Possible values: {available}"
        )


class ConfigError(TariCliError):
    """Invalid configuration file content or override."""


class ManifestError(TariCliError):
    """A Cargo manifest could not be read, parsed or written."""

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message} ({path})")
