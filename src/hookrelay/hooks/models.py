# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value types shared by aggregation, persistence, and dispatch."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ConfigurationError

REFERENCE_SEPARATOR: Final[str] = "::"
DEFAULT_PACKAGE_TYPE: Final[str] = "default"
DEFAULT_PRIORITY: Final[int] = 10
MAX_EXIT_CODE: Final[int] = 255


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Reference to one action entry point, serialized as ``"Target::method"``."""

    target: str
    method: str

    @classmethod
    def parse(cls, raw: str) -> ActionRef:
        """Return the reference encoded in ``raw``.

        Args:
            raw: Serialized reference such as ``"ConflictMarkers::check"``.

        Returns:
            ActionRef: Parsed reference.

        Raises:
            ConfigurationError: If ``raw`` does not split into exactly two
                non-empty ``::``-delimited components.
        """

        if not isinstance(raw, str):
            raise ConfigurationError(f"Could not parse action reference {raw!r}: expected a string")
        parts = raw.split(REFERENCE_SEPARATOR)
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise ConfigurationError(
                f'Could not parse action reference "{raw}": expected "Target{REFERENCE_SEPARATOR}method"'
            )
        target, method = (part.strip() for part in parts)
        return cls(target=target, method=method)

    def __str__(self) -> str:
        return f"{self.target}{REFERENCE_SEPARATOR}{self.method}"


@dataclass(frozen=True, slots=True)
class HookBinding:
    """One declaration contributed by a package for a hook and package type."""

    hook_name: str
    priority: int
    package_type: str
    actions: tuple[ActionRef, ...]


class PersistedConfig(BaseModel):
    """Resolved per-package view of the hook registry.

    ``hooks`` maps every known hook name to an ordered mapping of priority to
    serialized action references, already filtered for one package type.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    hooks: dict[str, dict[int, list[str]]] = Field(default_factory=dict)

    def priorities(self, hook_name: str) -> list[int]:
        """Return the priorities stored for ``hook_name`` in persisted order."""

        return list(self.hooks.get(hook_name, {}))

    def iter_references(self, hook_name: str) -> Iterator[tuple[int, str]]:
        """Yield ``(priority, reference)`` pairs for ``hook_name`` in persisted order."""

        for priority, references in self.hooks.get(hook_name, {}).items():
            for reference in references:
                yield priority, reference


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of one dispatcher invocation."""

    actions_executed: int
    exit_code: int

    def __post_init__(self) -> None:
        if not 0 <= self.exit_code <= MAX_EXIT_CODE:
            raise ValueError(f"exit code {self.exit_code} outside [0, {MAX_EXIT_CODE}]")


@dataclass(frozen=True, slots=True)
class ConfiguredPackage:
    """Package that received hook scripts and a persisted configuration."""

    name: str
    package_type: str
    config_file: Path
    scripts: tuple[Path, ...]


@dataclass(slots=True)
class InstallResult:
    """Aggregate outcome from configuring git hooks across packages."""

    configured: list[ConfiguredPackage] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    backups: list[Path] = field(default_factory=list)


def clamp_exit_code(value: int) -> int:
    """Return ``value`` clamped into the POSIX exit-code range."""

    return max(0, min(MAX_EXIT_CODE, value))


__all__ = [
    "DEFAULT_PACKAGE_TYPE",
    "DEFAULT_PRIORITY",
    "MAX_EXIT_CODE",
    "REFERENCE_SEPARATOR",
    "ActionRef",
    "ConfiguredPackage",
    "DispatchResult",
    "HookBinding",
    "InstallResult",
    "PersistedConfig",
    "clamp_exit_code",
]
