# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Option declarations and normalised option records for the hookrelay CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer

from ..hooks.models import DEFAULT_PACKAGE_TYPE

DEFAULT_ROOT: Final[Path] = Path(".")

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Root project directory holding pyproject.toml."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show actions without modifying files."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="Read this persisted configuration instead of .git/hookrelay/config.json."),
]
HOOK_FILTER_OPTION = Annotated[
    str | None,
    typer.Option("--hook", help="Only show the actions bound to this hook."),
]
TYPE_OPTION = Annotated[
    str,
    typer.Option("--type", "-t", help="Package type the configuration is resolved for."),
]
HOOK_ARGUMENT = Annotated[str, typer.Argument(help="Git hook to dispatch, e.g. pre-commit.")]


@dataclass(slots=True)
class InstallOptions:
    """Capture CLI options for hook installation."""

    root: Path
    dry_run: bool
    emoji: bool

    @classmethod
    def from_cli(cls, root: Path, *, dry_run: bool, emoji: bool) -> InstallOptions:
        """Return options parsed from CLI arguments."""

        return cls(root=root.resolve(), dry_run=dry_run, emoji=emoji)


@dataclass(slots=True)
class RunOptions:
    """Capture CLI options for dispatching one hook by hand."""

    hook: str
    root: Path
    config: Path | None

    @classmethod
    def from_cli(cls, hook: str, root: Path, config: Path | None) -> RunOptions:
        """Return options parsed from CLI arguments."""

        return cls(hook=hook, root=root.resolve(), config=config.resolve() if config is not None else None)


@dataclass(slots=True)
class ShowOptions:
    """Capture CLI options for printing a resolved configuration."""

    root: Path
    hook: str | None
    package_type: str = DEFAULT_PACKAGE_TYPE


__all__ = [
    "CONFIG_OPTION",
    "DEFAULT_ROOT",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "HOOK_ARGUMENT",
    "HOOK_FILTER_OPTION",
    "ROOT_OPTION",
    "TYPE_OPTION",
    "InstallOptions",
    "RunOptions",
    "ShowOptions",
]
