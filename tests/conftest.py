# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from hookrelay.console import get_console_manager
from hookrelay.git import HEAD

PackageFactory = Callable[..., Path]


@dataclass(slots=True)
class FakeGit:
    """In-memory stand-in for the git collaborator."""

    reference: str = HEAD
    files: list[str] = field(default_factory=list)
    calls: list[tuple[str, str | None]] = field(default_factory=list)

    def resolve_reference(self) -> str:
        return self.reference

    def changed_files(self, against: str, pattern: str | None = None) -> list[str]:
        self.calls.append((against, pattern))
        matcher = re.compile(pattern) if pattern else None
        return [path for path in self.files if matcher is None or matcher.search(path)]


@pytest.fixture(autouse=True)
def _fresh_consoles() -> Iterator[None]:
    get_console_manager().reset()
    yield
    get_console_manager().reset()


@pytest.fixture
def fake_git() -> FakeGit:
    """Return a git collaborator reporting no staged changes."""
    return FakeGit()


@pytest.fixture
def make_package() -> PackageFactory:
    """Return a factory writing a ``pyproject.toml`` with a ``[tool.hookrelay]`` table.

    ``body`` is appended verbatim below the table header, so callers write the
    TOML they want to exercise.
    """

    def _make(directory: Path, name: str, body: str = "", *, git: bool = False) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        text = f'[project]\nname = "{name}"\nversion = "1.0.0"\n\n[tool.hookrelay]\n{body}'
        (directory / "pyproject.toml").write_text(text, encoding="utf-8")
        if git:
            (directory / ".git" / "hooks").mkdir(parents=True, exist_ok=True)
        return directory

    return _make
