"""
Configuration loader — reads starterkit.yml into a Settings model.

Everything here has a sensible default, so a missing config file is not
an error. Source precedence, highest first:

    explicit path  >  STARTERKIT_CONFIG  >  starterkit.yml (walking up
    from the cwd)  >  built-in defaults

Individual STARTERKIT_* environment variables then override whatever
the file said.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from starterkit.core.errors import StarterkitError

logger = logging.getLogger(__name__)

CONFIG_FILE = "starterkit.yml"
ENV_CONFIG = "STARTERKIT_CONFIG"

# env var → Settings field
_ENV_OVERRIDES = {
    "STARTERKIT_COMMAND_TIMEOUT": "command_timeout",
    "STARTERKIT_PACKAGE_MANAGER": "package_manager",
    "STARTERKIT_MIN_GIT_VERSION": "min_git_version",
    "STARTERKIT_MIN_NODE_MAJOR": "min_node_major",
    "STARTERKIT_TEST_PROJECTS_DIR": "test_projects_dir",
}


class ConfigError(StarterkitError):
    """Raised when the configuration file or an override is invalid."""


class Settings(BaseModel):
    """Process-wide knobs for the orchestrator."""

    command_timeout: int = Field(default=300, gt=0)
    package_manager: str = "pnpm"
    min_git_version: str = "2.31.0"
    min_node_major: int = Field(default=18, gt=0)
    test_projects_dir: str = "next_test_projects"

    @field_validator("min_git_version")
    @classmethod
    def _dotted_version(cls, v: str) -> str:
        parts = v.split(".")
        if not all(p.isdigit() for p in parts):
            raise ValueError(f"expected a dotted numeric version, got {v!r}")
        return v

    @property
    def min_git_tuple(self) -> tuple[int, ...]:
        return tuple(int(p) for p in self.min_git_version.split("."))


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for starterkit.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Either flat or nested under a "starterkit" key
    if "starterkit" not in data:
        return data
    section = data["starterkit"]
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'starterkit' in {path}, got {type(section).__name__}")
    return section


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from file and environment.

    Args:
        path: Explicit config file. If None, uses STARTERKIT_CONFIG or
            searches upward for starterkit.yml.
        environ: Environment mapping (default: os.environ).

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    env = os.environ if environ is None else environ

    if path is None and env.get(ENV_CONFIG):
        path = Path(env[ENV_CONFIG])
        if not path.is_file():
            raise ConfigError(f"{ENV_CONFIG} points at a missing file: {path}")
    if path is None:
        path = find_config_file()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    data: dict[str, Any] = {}
    if path is not None:
        logger.debug("Loading settings from %s", path)
        data = dict(_read_yaml(path))

    for var, field_name in _ENV_OVERRIDES.items():
        if env.get(var):
            data[field_name] = env[var]

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger.debug("Settings: %s", settings.model_dump())
    return settings
