# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for collecting hook declarations into a registry."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import pytest

from hookrelay.errors import ConfigurationError
from hookrelay.hooks.aggregation import HookRegistry, aggregate, parse_declarations, parse_hook_key
from hookrelay.hooks.models import ActionRef
from hookrelay.packages import PackageInfo
from hookrelay.settings import PackageSettings


def _package(name: str, hooks: dict[str, object]) -> PackageInfo:
    return PackageInfo(
        name=name,
        path=Path("/nonexistent") / name,
        settings=PackageSettings(hooks=hooks),
        vcs_tracked=False,
    )


def test_registry_appends_without_deduplication() -> None:
    registry = HookRegistry()
    ref = ActionRef("Lint", "run")
    registry.add_entry("pre-commit", "default", ref, 10)
    registry.add_entry("pre-commit", "default", ref, 10)
    registry.add_entry("pre-commit", "library", ActionRef("Docs", "build"), 5)

    entries = registry.get_entries("pre-commit")

    assert entries == {
        10: {"default": [ref, ref]},
        5: {"library": [ActionRef("Docs", "build")]},
    }
    assert len(registry) == 3
    assert registry.hook_names() == ("pre-commit",)


def test_get_entries_returns_independent_copy() -> None:
    registry = HookRegistry()
    registry.add_entry("pre-push", "default", ActionRef("Tests", "run"), 10)

    snapshot = registry.get_entries("pre-push")
    snapshot[10]["default"].clear()
    snapshot[99] = {}

    assert registry.get_entries("pre-push") == {10: {"default": [ActionRef("Tests", "run")]}}


def test_get_entries_for_unknown_hook_is_empty() -> None:
    assert HookRegistry().get_entries("post-merge") == {}


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("pre-commit", (10, "pre-commit")),
        ("5.pre-commit", (5, "pre-commit")),
        ("-3.commit-msg", (-3, "commit-msg")),
    ],
)
def test_parse_hook_key(key: str, expected: tuple[int, str]) -> None:
    assert parse_hook_key("pkg", key) == expected


@pytest.mark.parametrize("key", ["high.pre-commit", "10."])
def test_parse_hook_key_rejects_malformed_keys(key: str) -> None:
    with pytest.raises(ConfigurationError, match="pkg"):
        parse_hook_key("pkg", key)


def test_parse_declarations_accepts_string_and_table_values() -> None:
    bindings = parse_declarations(
        "acme/checks",
        {
            "pre-commit": "Lint::run",
            "5.pre-push": {"library": "Docs::build", "default": "Tests::run"},
        },
    )

    summary = [(b.hook_name, b.priority, b.package_type, b.actions) for b in bindings]
    assert summary == [
        ("pre-commit", 10, "default", (ActionRef("Lint", "run"),)),
        ("pre-push", 5, "library", (ActionRef("Docs", "build"),)),
        ("pre-push", 5, "default", (ActionRef("Tests", "run"),)),
    ]


def test_parse_declarations_flattens_nested_priority_tables() -> None:
    bindings = parse_declarations("pkg", {"20": {"pre-commit": "Lint::run", "commit-msg": "Msg::check"}})

    assert [(b.priority, b.hook_name) for b in bindings] == [(20, "pre-commit"), (20, "commit-msg")]


def test_parse_declarations_flattens_negative_priority_tables_from_toml() -> None:
    hooks = tomllib.loads('[hooks]\n-5.pre-commit = "Early::run"\n"pre-commit" = "Late::run"\n')["hooks"]

    bindings = parse_declarations("pkg", hooks)

    assert hooks == {"-5": {"pre-commit": "Early::run"}, "pre-commit": "Late::run"}
    assert [(b.priority, b.hook_name, b.actions) for b in bindings] == [
        (-5, "pre-commit", (ActionRef("Early", "run"),)),
        (10, "pre-commit", (ActionRef("Late", "run"),)),
    ]


@pytest.mark.parametrize("reference", ["NoSeparatorHere", "A::b::c", "::run", "Lint::"])
def test_parse_declarations_rejects_malformed_references(reference: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        parse_declarations("acme/checks", {"pre-commit": reference})

    message = str(excinfo.value)
    assert "acme/checks" in message
    assert "pre-commit" in message


def test_parse_declarations_rejects_non_string_values() -> None:
    with pytest.raises(ConfigurationError, match="reference string"):
        parse_declarations("pkg", {"pre-commit": 42})


def test_aggregate_preserves_walk_order_at_equal_priority() -> None:
    packages = [
        _package("root", {"pre-commit": "Root::check"}),
        _package("vendor-a", {"pre-commit": "A::check", "5.pre-commit": "Early::check"}),
        _package("vendor-b", {"pre-commit": "B::check"}),
    ]

    registry = aggregate(packages)

    entries = registry.get_entries("pre-commit")
    assert sorted(entries) == [5, 10]
    assert [str(ref) for ref in entries[10]["default"]] == ["Root::check", "A::check", "B::check"]
    assert [str(ref) for ref in entries[5]["default"]] == ["Early::check"]


def test_aggregate_aborts_on_first_malformed_package() -> None:
    packages = [
        _package("good", {"pre-commit": "Lint::run"}),
        _package("bad", {"pre-commit": "NoSeparatorHere"}),
    ]

    with pytest.raises(ConfigurationError, match="bad"):
        aggregate(packages)


def test_aggregate_warns_about_unknown_hooks(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="hookrelay.hooks.aggregation")

    registry = aggregate([_package("pkg", {"pre-deploy": "Ship::it"})])

    assert registry.get_entries("pre-deploy") == {10: {"default": [ActionRef("Ship", "it")]}}
    assert "pre-deploy" in caplog.text
