# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configure git hooks for every package of a workspace."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..errors import InstallationError
from ..logging import info, ok, warn
from ..packages import PackageInfo, PackageSource, WorkspacePackageSource
from ..paths import ProjectPaths
from ..settings import RootSettings, load_root_settings
from .aggregation import HookRegistry, aggregate
from .codec import encode, write_config
from .models import DEFAULT_PACKAGE_TYPE, ConfiguredPackage, InstallResult
from .names import GIT_HOOK_NAMES
from .scripts import is_generated_script, render_hook_script

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InstallPlan:
    """Everything decided before the first filesystem write."""

    project_root: Path
    vendor_dir: Path
    registry: HookRegistry
    packages: tuple[tuple[PackageInfo, str | None], ...]


def resolve_package_type(package: PackageInfo, settings: RootSettings) -> str | None:
    """Return the package type governing which bindings apply to ``package``.

    Precedence: the root project's ``code-checker-types`` override, the
    package's own ``code-checker-type``, ``default`` for git checkouts, and
    otherwise ``None`` (the package receives no hooks).
    """

    override = settings.package_types.get(package.name)
    if override:
        return override
    if package.settings.package_type:
        return package.settings.package_type
    if package.vcs_tracked:
        return DEFAULT_PACKAGE_TYPE
    return None


def plan_installation(root: Path, *, source: PackageSource | None = None) -> InstallPlan:
    """Aggregate declarations and resolve package types for the workspace at ``root``.

    Nothing is written; a malformed declaration in any package aborts here.

    Raises:
        ConfigurationError: If the root settings or any declaration is malformed.
    """

    project_root = root.resolve()
    root_name, settings = load_root_settings(project_root)
    vendor_dir = (project_root / settings.vendor_dir).resolve()
    if source is None:
        repository_root = (project_root / settings.repository_root).resolve() if settings.repository_root else None
        source = WorkspacePackageSource(
            project_root,
            root_name=root_name,
            settings=settings,
            vendor_dir=vendor_dir,
            repository_root=repository_root,
        )
    packages = tuple(source.packages())
    registry = aggregate(packages)
    resolved = tuple((package, resolve_package_type(package, settings)) for package in packages)
    return InstallPlan(project_root=project_root, vendor_dir=vendor_dir, registry=registry, packages=resolved)


def install_hooks(
    root: Path,
    *,
    source: PackageSource | None = None,
    dry_run: bool = False,
    executable: str | None = None,
    use_emoji: bool = True,
) -> InstallResult:
    """Write hook scripts and a persisted configuration for every typed package.

    Args:
        root: Root project directory holding ``pyproject.toml``.
        source: Optional package collaborator; defaults to the workspace layout.
        dry_run: When ``True`` report what would be written without touching disk.
        executable: Interpreter embedded in generated scripts.
        use_emoji: Whether progress messages include emoji.

    Returns:
        InstallResult: Configured and skipped packages plus backed-up hooks.

    Raises:
        ConfigurationError: If any package metadata is malformed.
        InstallationError: If a directory or file cannot be written.
    """

    plan = plan_installation(root, source=source)
    result = InstallResult()
    for package, package_type in plan.packages:
        if not package_type:
            LOGGER.debug("package %s has no type; skipping", package.name)
            result.skipped.append(package.name)
            continue
        info(f"Configuring {package.name} ({package_type})", use_emoji=use_emoji)
        configured, backups = _configure_package(
            package,
            package_type,
            plan=plan,
            dry_run=dry_run,
            executable=executable,
            use_emoji=use_emoji,
        )
        result.configured.append(configured)
        result.backups.extend(backups)

    if dry_run:
        ok(f"Dry run complete: would configure {len(result.configured)} package(s)", use_emoji=use_emoji)
    else:
        ok(f"Configured git hooks for {len(result.configured)} package(s)", use_emoji=use_emoji)
    return result


def _configure_package(
    package: PackageInfo,
    package_type: str,
    *,
    plan: InstallPlan,
    dry_run: bool,
    executable: str | None,
    use_emoji: bool,
) -> tuple[ConfiguredPackage, list[Path]]:
    paths = ProjectPaths.for_root(package.path, vendor_dir=plan.vendor_dir)
    config = encode(plan.registry, package_type)
    scripts = [paths.hooks_dir / name for name in GIT_HOOK_NAMES]
    configured = ConfiguredPackage(
        name=package.name,
        package_type=package_type,
        config_file=paths.config_file,
        scripts=tuple(scripts),
    )
    if dry_run:
        return configured, []

    try:
        _clear_previous_installation(paths)
        paths.hooks_dir.mkdir(parents=True, exist_ok=True)
        body = render_hook_script(paths.relative_vendor_dir(), executable=executable)
        backups: list[Path] = []
        for destination in scripts:
            backup = _install_single_hook(destination, body, use_emoji=use_emoji)
            if backup is not None:
                backups.append(backup)
        write_config(paths.config_file, config)
    except OSError as exc:
        raise InstallationError(f"Unable to configure git hooks for {package.name}: {exc}") from exc
    return configured, backups


def _clear_previous_installation(paths: ProjectPaths) -> None:
    if paths.state_dir.exists():
        shutil.rmtree(paths.state_dir)
    if not paths.hooks_dir.is_dir():
        return
    for name in GIT_HOOK_NAMES:
        candidate = paths.hooks_dir / name
        if is_generated_script(candidate):
            candidate.unlink()


def _install_single_hook(destination: Path, body: str, *, use_emoji: bool) -> Path | None:
    """Write ``body`` to ``destination``, backing up a foreign hook first.

    Returns:
        Path | None: Backup location when a user-provided hook was moved aside.
    """

    backup_path: Path | None = None
    if destination.exists() or destination.is_symlink():
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        backup_path = destination.with_name(f"{destination.name}.backup.{timestamp}")
        warn(f"Backing up existing {destination.name} hook to {backup_path}", use_emoji=use_emoji)
        destination.rename(backup_path)

    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=destination.parent,
        prefix=f".{destination.name}.",
        delete=False,
    )
    try:
        with handle:
            handle.write(body)
        os.chmod(handle.name, 0o755)
        os.replace(handle.name, destination)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise
    return backup_path


__all__ = ["InstallPlan", "install_hooks", "plan_installation", "resolve_package_type"]
