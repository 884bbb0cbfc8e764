# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuring git hooks across a workspace."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from hookrelay.errors import ConfigurationError, InstallationError
from hookrelay.hooks import installer as installer_module
from hookrelay.hooks.codec import read_config
from hookrelay.hooks.installer import install_hooks, plan_installation, resolve_package_type
from hookrelay.hooks.names import GIT_HOOK_NAMES
from hookrelay.hooks.scripts import SCRIPT_MARKER, is_generated_script
from hookrelay.packages import PackageInfo, StaticPackageSource
from hookrelay.settings import PackageSettings, RootSettings

ROOT_TABLE = """\
code-checker-type = "app"

[tool.hookrelay.hooks]
"pre-commit" = "Root::check"
"5.pre-push" = { library = "Docs::build", default = "Tests::run" }
"""


def _workspace(tmp_path: Path, make_package) -> Path:
    root = make_package(tmp_path / "project", "acme/app", ROOT_TABLE, git=True)
    make_package(
        root / "vendor" / "checks",
        "acme/checks",
        'code-checker-type = "library"\n\n[tool.hookrelay.hooks]\n"pre-commit" = "Checks::lint"\n',
        git=True,
    )
    make_package(root / "vendor" / "untyped", "acme/untyped", '[tool.hookrelay.hooks]\n"pre-commit" = "Other::run"\n')
    return root


def _info(name: str, *, package_type: str | None = None, vcs_tracked: bool = False) -> PackageInfo:
    return PackageInfo(
        name=name,
        path=Path("/nonexistent") / name,
        settings=PackageSettings(package_type=package_type),
        vcs_tracked=vcs_tracked,
    )


@pytest.mark.parametrize(
    ("package", "overrides", "expected"),
    [
        (_info("pkg", package_type="library", vcs_tracked=True), {"pkg": "app"}, "app"),
        (_info("pkg", package_type="library", vcs_tracked=True), {}, "library"),
        (_info("pkg", vcs_tracked=True), {}, "default"),
        (_info("pkg"), {}, None),
        (_info("pkg"), {"pkg": "tool"}, "tool"),
    ],
)
def test_resolve_package_type_precedence(
    package: PackageInfo,
    overrides: dict[str, str],
    expected: str | None,
) -> None:
    settings = RootSettings.model_validate({"code-checker-types": overrides})

    assert resolve_package_type(package, settings) == expected


def test_install_writes_scripts_and_config_per_package(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)

    result = install_hooks(root, executable="/opt/python/bin/python3", use_emoji=False)

    assert [(item.name, item.package_type) for item in result.configured] == [
        ("acme/app", "app"),
        ("acme/checks", "library"),
    ]
    assert result.skipped == ["acme/untyped"]
    assert result.backups == []

    hooks_dir = root / ".git" / "hooks"
    for name in GIT_HOOK_NAMES:
        script = hooks_dir / name
        assert os.access(script, os.X_OK)
        text = script.read_text(encoding="utf-8")
        assert text.startswith("#!/opt/python/bin/python3\n")
        assert SCRIPT_MARKER in text
        assert '"../../vendor"' in text

    root_config = read_config(root / ".git" / "hookrelay" / "config.json")
    assert root_config.hooks["pre-commit"] == {10: ["Root::check", "Checks::lint", "Other::run"]}
    assert root_config.hooks["pre-push"] == {5: ["Tests::run"]}

    vendor_config = read_config(root / "vendor" / "checks" / ".git" / "hookrelay" / "config.json")
    assert vendor_config.hooks["pre-push"] == {5: ["Docs::build"]}
    assert not (root / "vendor" / "untyped" / ".git").exists()


def test_vendor_scripts_point_back_at_root_vendor_dir(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)

    install_hooks(root, use_emoji=False)

    script = (root / "vendor" / "checks" / ".git" / "hooks" / "pre-commit").read_text(encoding="utf-8")
    assert script.startswith(f"#!{sys.executable}\n")
    assert '"../../.."' in script


def test_install_is_idempotent(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)
    config_file = root / ".git" / "hookrelay" / "config.json"

    install_hooks(root, use_emoji=False)
    first = read_config(config_file)
    (root / ".git" / "hookrelay" / "stale.json").write_text("{}", encoding="utf-8")
    second_result = install_hooks(root, use_emoji=False)

    assert read_config(config_file) == first
    assert second_result.backups == []
    assert sorted(path.name for path in (root / ".git" / "hookrelay").iterdir()) == ["config.json"]
    assert sorted(path.name for path in (root / ".git" / "hooks").iterdir()) == sorted(GIT_HOOK_NAMES)


def test_install_backs_up_foreign_hooks(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)
    custom = root / ".git" / "hooks" / "pre-commit"
    custom.write_text("#!/bin/sh\necho custom\n", encoding="utf-8")

    result = install_hooks(root, use_emoji=False)

    assert len(result.backups) == 1
    backup = result.backups[0]
    assert backup.name.startswith("pre-commit.backup.")
    assert backup.read_text(encoding="utf-8") == "#!/bin/sh\necho custom\n"
    assert is_generated_script(custom)


def test_dry_run_touches_nothing(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)

    result = install_hooks(root, dry_run=True, use_emoji=False)

    assert [item.name for item in result.configured] == ["acme/app", "acme/checks"]
    assert list((root / ".git" / "hooks").iterdir()) == []
    assert not (root / ".git" / "hookrelay").exists()


def test_malformed_declaration_aborts_before_any_write(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)
    make_package(
        root / "vendor" / "zz-broken",
        "acme/broken",
        '[tool.hookrelay.hooks]\n"pre-commit" = "NoSeparatorHere"\n',
    )

    with pytest.raises(ConfigurationError, match="acme/broken"):
        install_hooks(root, use_emoji=False)

    assert list((root / ".git" / "hooks").iterdir()) == []
    assert not (root / ".git" / "hookrelay").exists()


def test_repository_root_override(tmp_path: Path, make_package) -> None:
    root = make_package(
        tmp_path / "project",
        "acme/app",
        'git-repository-root-path = ".."\n\n[tool.hookrelay.hooks]\n"commit-msg" = "Msg::check"\n',
    )
    (tmp_path / ".git" / "hooks").mkdir(parents=True)

    result = install_hooks(root, use_emoji=False)

    assert result.configured[0].config_file == tmp_path.resolve() / ".git" / "hookrelay" / "config.json"
    assert read_config(result.configured[0].config_file).hooks["commit-msg"] == {10: ["Msg::check"]}
    assert '"../../project/vendor"' in (tmp_path / ".git" / "hooks" / "commit-msg").read_text(encoding="utf-8")


def test_root_type_overrides_apply_to_vendor_packages(tmp_path: Path, make_package) -> None:
    root = _workspace(tmp_path, make_package)
    pyproject = root / "pyproject.toml"
    pyproject.write_text(
        pyproject.read_text(encoding="utf-8").replace(
            'code-checker-type = "app"',
            'code-checker-type = "app"\ncode-checker-types = { "acme/untyped" = "library" }',
        ),
        encoding="utf-8",
    )
    (root / "vendor" / "untyped" / ".git").mkdir()

    result = install_hooks(root, use_emoji=False)

    assert [(item.name, item.package_type) for item in result.configured] == [
        ("acme/app", "app"),
        ("acme/checks", "library"),
        ("acme/untyped", "library"),
    ]
    assert result.skipped == []


def test_custom_package_source(tmp_path: Path, make_package) -> None:
    root = make_package(tmp_path / "project", "acme/app", git=True)
    source = StaticPackageSource(
        [
            PackageInfo(
                name="acme/app",
                path=root,
                settings=PackageSettings(hooks={"post-merge": "Sync::run"}),
                vcs_tracked=True,
            )
        ]
    )

    plan = plan_installation(root, source=source)
    install_hooks(root, source=source, use_emoji=False)

    assert [(package.name, package_type) for package, package_type in plan.packages] == [("acme/app", "default")]
    assert read_config(root / ".git" / "hookrelay" / "config.json").hooks["post-merge"] == {10: ["Sync::run"]}


def test_filesystem_errors_become_installation_errors(
    tmp_path: Path,
    make_package,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    root = _workspace(tmp_path, make_package)

    def _broken(*args: object, **kwargs: object) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr(installer_module, "write_config", _broken)

    with pytest.raises(InstallationError, match="acme/app"):
        install_hooks(root, use_emoji=False)
