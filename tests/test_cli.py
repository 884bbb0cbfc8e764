# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI tests for the hookrelay commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hookrelay.actions.registry import ActionRegistry
from hookrelay.cli.app import app
from hookrelay.hooks import dispatcher as dispatcher_module
from hookrelay.hooks.names import GIT_HOOK_NAMES

HOOKS_TABLE = """\
[tool.hookrelay.hooks]
"pre-commit" = "Lint::run"
"5.pre-commit" = { library = "Docs::build" }
"""


def test_install_configures_workspace(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE, git=True)
    runner = CliRunner()

    result = runner.invoke(app, ["install", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0
    assert "Configured git hooks for 1 package(s)" in result.stdout
    assert "✅" not in result.stdout
    assert (tmp_path / ".git" / "hookrelay" / "config.json").is_file()


def test_install_dry_run(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE, git=True)
    runner = CliRunner()

    result = runner.invoke(app, ["install", "--root", str(tmp_path), "--dry-run", "--no-emoji"])

    assert result.exit_code == 0
    assert "Dry run" in result.stdout
    assert "DRY RUN: would write" in result.stdout
    assert not (tmp_path / ".git" / "hookrelay").exists()


def test_install_reports_malformed_declarations(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", '[tool.hookrelay.hooks]\n"pre-commit" = "NoSeparatorHere"\n', git=True)
    runner = CliRunner()

    result = runner.invoke(app, ["install", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 2
    assert "NoSeparatorHere" in result.stdout


def test_install_warns_about_untyped_packages(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE)
    runner = CliRunner()

    result = runner.invoke(app, ["install", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0
    assert "Skipped packages without a type: acme/app" in result.stdout


def test_run_exits_with_dispatch_code(tmp_path: Path, make_package, monkeypatch: pytest.MonkeyPatch) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE, git=True)
    runner = CliRunner()
    assert runner.invoke(app, ["install", "--root", str(tmp_path), "--no-emoji"]).exit_code == 0

    calls: list[str] = []
    registry = ActionRegistry(use_entry_points=False, allow_imports=False)
    registry.register_functions("Lint", {"run": lambda context: calls.append(context.hook_name) or 7})
    monkeypatch.setattr(dispatcher_module, "default_registry", lambda: registry)

    result = runner.invoke(app, ["run", "pre-commit", "--root", str(tmp_path)])

    assert result.exit_code == 7
    assert calls == ["pre-commit"]


def test_run_without_configuration_is_a_configuration_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["run", "pre-commit", "--root", str(tmp_path)])

    assert result.exit_code == 2
    assert "Unable to read hook configuration" in result.stdout


def test_show_prints_resolved_configuration(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE)
    runner = CliRunner()

    default = runner.invoke(app, ["show", "--root", str(tmp_path)])
    library = runner.invoke(app, ["show", "--root", str(tmp_path), "--type", "library", "--hook", "pre-commit"])

    assert default.exit_code == 0
    assert json.loads(default.stdout)["hooks"]["pre-commit"] == {"10": ["Lint::run"]}
    assert list(json.loads(default.stdout)["hooks"]) == list(GIT_HOOK_NAMES)
    assert library.exit_code == 0
    assert json.loads(library.stdout)["hooks"] == {"pre-commit": {"5": ["Docs::build"], "10": ["Lint::run"]}}


def test_show_rejects_unknown_hook(tmp_path: Path, make_package) -> None:
    make_package(tmp_path, "acme/app", HOOKS_TABLE)
    runner = CliRunner()

    result = runner.invoke(app, ["show", "--root", str(tmp_path), "--hook", "pre-deploy"])

    assert result.exit_code == 2
    assert "Unknown git hook" in result.stdout


def test_hooks_lists_known_names() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["hooks"])

    assert result.exit_code == 0
    assert result.stdout.split() == list(GIT_HOOK_NAMES)
