# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Package discovery for the installation coordinator."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from .paths import GIT_DIR_NAME
from .settings import PYPROJECT_FILE, PackageSettings, RootSettings, load_package_settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Installed package as reported by the package collaborator.

    Attributes:
        name: Distribution name declared by the package.
        path: Directory holding the package sources.
        settings: ``[tool.hookrelay]`` table published by the package.
        vcs_tracked: Whether the package directory is a git checkout.
    """

    name: str
    path: Path
    settings: PackageSettings
    vcs_tracked: bool

    @classmethod
    def from_directory(cls, directory: Path) -> PackageInfo:
        """Return the package described by the ``pyproject.toml`` in ``directory``."""

        resolved = directory.resolve()
        name, settings = load_package_settings(resolved)
        return cls(
            name=name,
            path=resolved,
            settings=settings,
            vcs_tracked=(resolved / GIT_DIR_NAME).exists(),
        )


@runtime_checkable
class PackageSource(Protocol):
    """Yield the packages whose hook declarations should be aggregated."""

    def packages(self) -> Sequence[PackageInfo]:
        """Return packages in the order they should be walked."""
        ...


class WorkspacePackageSource:
    """Enumerate the root project and the packages installed in its vendor directory.

    The root project is always walked first. Vendor packages follow, sorted by
    directory name, then any extra directories matched by the ``packages``
    globs of the root settings. A directory is only considered a package when
    it carries a ``pyproject.toml``.
    """

    def __init__(
        self,
        root: Path,
        *,
        root_name: str,
        settings: RootSettings,
        vendor_dir: Path,
        repository_root: Path | None = None,
    ) -> None:
        self._root = root.resolve()
        self._repository_root = (repository_root or root).resolve()
        self._root_name = root_name
        self._settings = settings
        self._vendor_dir = vendor_dir

    def packages(self) -> list[PackageInfo]:
        """Return the root project followed by every discovered dependency."""

        found: list[PackageInfo] = [
            PackageInfo(
                name=self._root_name,
                path=self._repository_root,
                settings=self._settings,
                vcs_tracked=(self._repository_root / GIT_DIR_NAME).exists(),
            )
        ]
        seen: set[Path] = {self._root, self._repository_root}
        for directory in self._candidate_directories():
            resolved = directory.resolve()
            if resolved in seen or not (resolved / PYPROJECT_FILE).is_file():
                continue
            seen.add(resolved)
            package = PackageInfo.from_directory(resolved)
            LOGGER.debug("discovered package %s at %s", package.name, package.path)
            found.append(package)
        return found

    def _candidate_directories(self) -> Iterable[Path]:
        if self._vendor_dir.is_dir():
            yield from sorted(entry for entry in self._vendor_dir.iterdir() if entry.is_dir())
        for pattern in self._settings.packages:
            yield from sorted(entry for entry in self._root.glob(pattern) if entry.is_dir())


class StaticPackageSource:
    """Serve a fixed, pre-built package list."""

    def __init__(self, packages: Iterable[PackageInfo]) -> None:
        self._packages = list(packages)

    def packages(self) -> list[PackageInfo]:
        return list(self._packages)


__all__ = ["PackageInfo", "PackageSource", "StaticPackageSource", "WorkspacePackageSource"]
