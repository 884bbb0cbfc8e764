# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Action contract executed by the dispatcher."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..git import GitClient, SubprocessGit

ActionReturn = int | bool | None


@dataclass(frozen=True, slots=True)
class ActionContext:
    """Arguments every action is constructed from."""

    hook_name: str
    project_root: Path
    vendor_dir: Path
    git: GitClient | None = None


@runtime_checkable
class Action(Protocol):
    """Lifecycle shared by every action; entry methods are looked up by name."""

    def init(self) -> None:
        """Prepare the action before its entry method runs."""
        ...

    def shutdown(self) -> None:
        """Tear the action down after its entry method returned."""
        ...


class BaseAction:
    """Convenience base class supplying no-op lifecycle methods and git helpers.

    Subclasses add one or more entry methods returning an exit code, where
    ``0`` means success. The dispatcher calls :meth:`init`, the entry method
    named by the configuration, then :meth:`shutdown`.
    """

    def __init__(
        self,
        hook: str,
        root: Path,
        vendor_dir: Path | None = None,
        *,
        git: GitClient | None = None,
    ) -> None:
        """Create an action for ``hook`` running against the repository at ``root``.

        Args:
            hook: Name of the git hook that triggered the action.
            root: Repository working tree.
            vendor_dir: Shared vendor directory of the root project.
            git: Optional git collaborator; defaults to :class:`SubprocessGit`.
        """

        self.hook = hook
        self.root = root
        self.vendor_dir = vendor_dir if vendor_dir is not None else root / "vendor"
        self._git = git

    @property
    def git(self) -> GitClient:
        """Return the git collaborator, creating the subprocess client on first use."""

        if self._git is None:
            self._git = SubprocessGit(self.root)
        return self._git

    def init(self) -> None:
        """Do nothing; override to prepare state before the entry method."""

    def shutdown(self) -> None:
        """Do nothing; override to release state after the entry method."""

    def changed_files(self, pattern: str | None = None) -> list[Path]:
        """Return absolute paths of staged files added, copied, modified or renamed.

        Staged changes are compared against ``HEAD``, or against the empty tree
        when the repository has no commit yet.

        Args:
            pattern: Optional regular expression the relative path must match.

        Returns:
            list[Path]: Changed files under :attr:`root`.
        """

        against = self.git.resolve_reference()
        return [self.root / relative for relative in self.git.changed_files(against, pattern)]

    def recursive_glob(self, pattern: str) -> list[Path]:
        """Return files under :attr:`root` whose name matches ``pattern``.

        The vendor directory and ``.git`` are never descended into.
        """

        skipped = {self.vendor_dir.resolve(), (self.root / ".git").resolve()}
        matches: list[Path] = []
        for current, dirnames, filenames in os.walk(self.root):
            current_path = Path(current)
            dirnames[:] = sorted(name for name in dirnames if (current_path / name).resolve() not in skipped)
            matches.extend(current_path / name for name in sorted(filenames) if fnmatch.fnmatch(name, pattern))
        return matches


def _noop(context: ActionContext) -> None:
    del context


EntryCallable = Callable[[ActionContext], ActionReturn]


@dataclass(slots=True)
class FunctionAction:
    """Action assembled from plain callables instead of a subclass.

    ``entries`` maps entry-method names to callables receiving the
    :class:`ActionContext`. Entry names are exposed as attributes so the
    dispatcher resolves them exactly like methods of a class-based action.
    """

    context: ActionContext
    entries: Mapping[str, EntryCallable]
    on_init: Callable[[ActionContext], None] = _noop
    on_shutdown: Callable[[ActionContext], None] = _noop

    def init(self) -> None:
        self.on_init(self.context)

    def shutdown(self) -> None:
        self.on_shutdown(self.context)

    def __getattr__(self, name: str) -> Callable[[], ActionReturn]:
        try:
            entry = object.__getattribute__(self, "entries")[name]
        except KeyError:
            raise AttributeError(name) from None
        return lambda: entry(self.context)


__all__ = ["Action", "ActionContext", "ActionReturn", "BaseAction", "EntryCallable", "FunctionAction"]
