# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem locations used by the installer and the dispatcher."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

GIT_DIR_NAME: Final[str] = ".git"
HOOKS_DIR_NAME: Final[str] = "hooks"
STATE_DIR_NAME: Final[str] = "hookrelay"
CONFIG_FILE_NAME: Final[str] = "config.json"
DEFAULT_VENDOR_DIR: Final[str] = "vendor"
SOURCE_DIR_NAME: Final[str] = "src"


@dataclass(frozen=True, slots=True)
class ProjectPaths:
    """Describe every location hookrelay reads or writes for one repository.

    Attributes:
        root: Working tree root of the repository.
        git_dir: ``.git`` directory of the repository.
        hooks_dir: Directory git executes hook scripts from.
        state_dir: Directory owned by hookrelay inside ``.git``.
        config_file: Persisted hook configuration consumed by the dispatcher.
        vendor_dir: Shared vendor directory of the root project.
    """

    root: Path
    git_dir: Path
    hooks_dir: Path
    state_dir: Path
    config_file: Path
    vendor_dir: Path

    @classmethod
    def for_root(cls, root: Path, *, vendor_dir: Path | None = None) -> ProjectPaths:
        """Return the paths for the repository rooted at ``root``.

        Args:
            root: Repository working tree.
            vendor_dir: Optional vendor directory; defaults to ``<root>/vendor``.

        Returns:
            ProjectPaths: Resolved locations for ``root``.
        """

        resolved = root.resolve()
        git_dir = resolved / GIT_DIR_NAME
        state_dir = git_dir / STATE_DIR_NAME
        return cls(
            root=resolved,
            git_dir=git_dir,
            hooks_dir=git_dir / HOOKS_DIR_NAME,
            state_dir=state_dir,
            config_file=state_dir / CONFIG_FILE_NAME,
            vendor_dir=(vendor_dir or resolved / DEFAULT_VENDOR_DIR).resolve(),
        )

    def vendor_import_roots(self) -> list[Path]:
        """Return the import roots of the packages installed in :attr:`vendor_dir`.

        Each vendor package contributes its ``src/`` directory when it has one,
        otherwise the package directory itself, in sorted directory order.
        """

        if not self.vendor_dir.is_dir():
            return []
        roots: list[Path] = []
        for package_dir in sorted(entry for entry in self.vendor_dir.iterdir() if entry.is_dir()):
            source_dir = package_dir / SOURCE_DIR_NAME
            roots.append(source_dir if source_dir.is_dir() else package_dir)
        return roots

    def relative_vendor_dir(self) -> str:
        """Return the vendor directory relative to :attr:`hooks_dir`.

        Generated hook scripts resolve the shared runtime location from their
        own position, so the path must stay relative.
        """

        return Path(os.path.relpath(self.vendor_dir, self.hooks_dir)).as_posix()


__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_VENDOR_DIR",
    "GIT_DIR_NAME",
    "HOOKS_DIR_NAME",
    "SOURCE_DIR_NAME",
    "STATE_DIR_NAME",
    "ProjectPaths",
]
