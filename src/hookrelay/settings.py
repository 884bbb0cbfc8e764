# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the ``[tool.hookrelay]`` table of ``pyproject.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

PYPROJECT_FILE: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "hookrelay"

PyProjectPayload: TypeAlias = Mapping[str, Any]


class PackageSettings(BaseModel):
    """Hook declarations and type published by a single package.

    ``hooks`` is kept loosely typed here; :func:`hookrelay.hooks.aggregation.parse_declarations`
    validates each entry so errors can name the offending package and key.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    hooks: dict[str, Any] = Field(default_factory=dict)
    package_type: str | None = Field(default=None, alias="code-checker-type")


class RootSettings(PackageSettings):
    """Settings read from the root project, which also steers installation."""

    package_types: dict[str, str] = Field(default_factory=dict, alias="code-checker-types")
    vendor_dir: str = Field(default="vendor", alias="vendor-dir")
    repository_root: str | None = Field(default=None, alias="git-repository-root-path")
    packages: list[str] = Field(default_factory=list)


def read_pyproject(path: Path) -> PyProjectPayload:
    """Return the parsed ``pyproject.toml`` at ``path`` or ``{}`` when absent.

    Args:
        path: Location of the TOML document.

    Returns:
        PyProjectPayload: Parsed document.

    Raises:
        ConfigurationError: If the document exists but cannot be parsed.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Unable to read {path}: {exc}") from exc


def extract_section(payload: PyProjectPayload) -> Mapping[str, Any]:
    """Return the ``[tool.hookrelay]`` table of ``payload`` (empty when missing)."""

    tool = payload.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool, Mapping):
        return {}
    section = tool.get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] must be a table")
    return section


def extract_project_name(payload: PyProjectPayload) -> str | None:
    """Return the project name declared within ``payload`` when present.

    Args:
        payload: Parsed ``pyproject.toml`` mapping.

    Returns:
        str | None: Project name or ``None`` when not present.
    """

    project = payload.get("project")
    if isinstance(project, Mapping):
        candidate = project.get("name")
        if isinstance(candidate, str):
            return candidate
    tool = payload.get(PYPROJECT_TOOL_KEY)
    if isinstance(tool, Mapping):
        poetry = tool.get("poetry")
        if isinstance(poetry, Mapping):
            candidate = poetry.get("name")
            if isinstance(candidate, str):
                return candidate
    return None


SettingsT = TypeVar("SettingsT", bound=PackageSettings)


def load_package_settings(directory: Path) -> tuple[str, PackageSettings]:
    """Return the declared name and hook settings of the package in ``directory``."""

    payload = read_pyproject(directory / PYPROJECT_FILE)
    name = extract_project_name(payload) or directory.name
    return name, _validate(PackageSettings, extract_section(payload), name)


def load_root_settings(directory: Path) -> tuple[str, RootSettings]:
    """Return the declared name and settings of the root project in ``directory``."""

    payload = read_pyproject(directory / PYPROJECT_FILE)
    name = extract_project_name(payload) or directory.name
    return name, _validate(RootSettings, extract_section(payload), name)


def _validate(
    model: type[SettingsT],
    section: Mapping[str, Any],
    owner: str,
) -> SettingsT:
    try:
        return model.model_validate(dict(section))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid [tool.hookrelay] settings in package {owner}: {exc}") from exc


__all__ = [
    "PYPROJECT_FILE",
    "PackageSettings",
    "RootSettings",
    "extract_project_name",
    "extract_section",
    "load_package_settings",
    "load_root_settings",
    "read_pyproject",
]
