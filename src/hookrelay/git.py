# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Narrow git collaborator used by actions to find staged changes."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .process import CommandOptions, SubprocessExecutionError, run_command

HEAD: Final[str] = "HEAD"
# Object id of the empty tree, diffed against before the first commit exists.
EMPTY_TREE: Final[str] = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
CHANGE_FILTER: Final[str] = "ACMR"

GitRunner = Callable[[Sequence[str], Path], tuple[int, list[str]]]


@runtime_checkable
class GitClient(Protocol):
    """Operations actions need from the version-control system."""

    def resolve_reference(self) -> str:
        """Return the reference staged changes should be compared against."""
        ...

    def changed_files(self, against: str, pattern: str | None = None) -> list[str]:
        """Return repository-relative paths added, copied, modified or renamed since ``against``."""
        ...


class SubprocessGit:
    """:class:`GitClient` backed by the ``git`` executable."""

    def __init__(self, root: Path, *, runner: GitRunner | None = None) -> None:
        """Create a git client for the repository at ``root``.

        Args:
            root: Working tree the commands run in.
            runner: Optional command runner returning ``(returncode, lines)`` where
                ``lines`` is stdout on success and stderr on failure.
        """

        self._root = root
        self._runner = runner or self._default_runner

    def resolve_reference(self) -> str:
        """Return ``HEAD`` when it resolves, else the empty-tree object id."""

        returncode, output = self._runner(["git", "rev-parse", "--verify", "--quiet", HEAD], self._root)
        if returncode == 0 and any(line.strip() for line in output):
            return HEAD
        return EMPTY_TREE

    def changed_files(self, against: str, pattern: str | None = None) -> list[str]:
        """Return staged paths changed relative to ``against``, filtered by ``pattern``.

        Args:
            against: Commit-ish or tree id to diff the index against.
            pattern: Optional regular expression applied with :func:`re.search`.

        Returns:
            list[str]: Repository-relative paths in git's output order.

        Raises:
            SubprocessExecutionError: If git cannot compute the diff.
        """

        cmd = ["git", "diff-index", "--cached", "--name-only", f"--diff-filter={CHANGE_FILTER}", against]
        returncode, output = self._runner(cmd, self._root)
        if returncode != 0:
            raise SubprocessExecutionError(cmd, returncode, None, "\n".join(output))
        matcher = re.compile(pattern) if pattern else None
        files: list[str] = []
        for raw in output:
            candidate = raw.strip()
            if not candidate:
                continue
            if matcher is not None and not matcher.search(candidate):
                continue
            files.append(candidate)
        return files

    @staticmethod
    def _default_runner(cmd: Sequence[str], root: Path) -> tuple[int, list[str]]:
        cp = run_command(cmd, options=CommandOptions(cwd=root, capture_output=True, text=True, check=False))
        output = cp.stdout if cp.returncode == 0 else cp.stderr
        return cp.returncode, (output or "").splitlines()


__all__ = ["CHANGE_FILTER", "EMPTY_TREE", "HEAD", "GitClient", "GitRunner", "SubprocessGit"]
