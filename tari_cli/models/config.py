"""CLI configuration model."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from tari_cli.errors import ConfigError
from tari_cli.models.git import TemplateRepository

logger = logging.getLogger(__name__)

DEFAULT_DATA_FOLDER_NAME = "tari_cli"
DEFAULT_CONFIG_FILE_NAME = "tari.config.yaml"
DEFAULT_TEMPLATE_REPOSITORY_URL = "https://github.com/tari-project/wasm-template"

VALID_OVERRIDE_KEYS = (
    "project_template_repository.url",
    "project_template_repository.branch",
    "project_template_repository.folder",
    "wasm_template_repository.url",
    "wasm_template_repository.branch",
    "wasm_template_repository.folder",
)


def default_base_dir() -> Path:
    """Directory where mirrors and other CLI data are stored."""
    data_home = os.environ.get("XDG_DATA_HOME")
    root = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return root / DEFAULT_DATA_FOLDER_NAME


def default_config_file() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    root = Path(config_home) if config_home else Path.home() / ".config"
    return root / DEFAULT_DATA_FOLDER_NAME / DEFAULT_CONFIG_FILE_NAME


def parse_override(text: str) -> tuple[str, str]:
    """Split a KEY=VALUE override and check the key is supported."""
    if not text:
        raise ConfigError("Override cannot be empty!")
    parts = text.split("=")
    if len(parts) != 2:
        raise ConfigError(f"Invalid override: {text}")
    key, value = parts
    if key not in VALID_OVERRIDE_KEYS:
        raise ConfigError(f"Override key invalid: {key}")
    return key, value


class Config(BaseModel):
    """Template repositories used by the CLI."""

    project_template_repository: TemplateRepository = Field(
        default_factory=lambda: TemplateRepository(
            url=DEFAULT_TEMPLATE_REPOSITORY_URL,
            branch="main",
            folder="project_templates",
        )
    )
    wasm_template_repository: TemplateRepository = Field(
        default_factory=lambda: TemplateRepository(
            url=DEFAULT_TEMPLATE_REPOSITORY_URL,
            branch="main",
            folder="wasm_templates",
        )
    )

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    def write(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)

    @classmethod
    def load_or_create(cls, path: Path) -> "Config":
        """Load the config at path, writing defaults if it is missing or broken."""
        if not path.is_file():
            logger.info(f"Existing config not found. Creating a new config at {path}")
            config = cls()
            config.write(path)
            return config

        try:
            return cls.from_yaml(path)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Failed to open config file {path}: {e}, creating default...")
            config = cls()
            config.write(path)
            return config

    def apply_override(self, key: str, value: str) -> "Config":
        """Return a copy of this config with one dotted key replaced."""
        if key not in VALID_OVERRIDE_KEYS:
            raise ConfigError(f"Invalid key: {key}")
        section, field = key.split(".")
        repository: TemplateRepository = getattr(self, section)
        try:
            updated = TemplateRepository.model_validate({**repository.model_dump(), field: value})
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {key}: {e.errors()[0]['msg']}") from e
        return self.model_copy(update={section: updated})

    def with_overrides(self, overrides: list[tuple[str, str]]) -> "Config":
        config = self
        for key, value in overrides:
            config = config.apply_override(key, value)
        return config
