# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helper services used by the hookrelay CLI commands."""

from __future__ import annotations

from ..errors import HookRelayError
from ..hooks.codec import dumps, encode
from ..hooks.dispatcher import run_hook
from ..hooks.installer import install_hooks, plan_installation
from ..hooks.models import DispatchResult, InstallResult, PersistedConfig
from ._cli_models import InstallOptions, RunOptions, ShowOptions
from .shared import CLIError, CLILogger


def perform_installation(options: InstallOptions, *, logger: CLILogger) -> InstallResult:
    """Install hooks for the provided options.

    Args:
        options: Normalized CLI options containing paths and runtime flags.
        logger: Logger used to emit user-facing messages.

    Returns:
        The result reported by :func:`install_hooks`.

    Raises:
        CLIError: Raised when metadata is malformed or files cannot be written.
    """

    try:
        return install_hooks(options.root, dry_run=options.dry_run, use_emoji=options.emoji)
    except HookRelayError as exc:
        logger.fail(str(exc))
        raise CLIError.from_error(exc) from exc


def emit_install_summary(result: InstallResult, options: InstallOptions, *, logger: CLILogger) -> None:
    """Emit summary lines after attempting hook installation.

    Args:
        result: The installation result from :func:`perform_installation`.
        options: CLI options controlling dry-run behaviour and emoji output.
        logger: Logger used to display summary warnings.
    """

    if result.skipped:
        logger.warn(f"Skipped packages without a type: {', '.join(result.skipped)}")
    if result.backups:
        backup_paths = ", ".join(str(path) for path in result.backups)
        logger.warn(f"Backed up existing hooks: {backup_paths}")
    if options.dry_run:
        for package in result.configured:
            logger.warn(f"DRY RUN: would write {package.config_file} and {len(package.scripts)} hook scripts")


def perform_dispatch(options: RunOptions, *, logger: CLILogger) -> DispatchResult:
    """Dispatch a hook using the persisted configuration of ``options.root``."""

    try:
        return run_hook(options.hook, options.root, config_path=options.config)
    except HookRelayError as exc:
        logger.fail(str(exc))
        raise CLIError.from_error(exc) from exc


def render_configuration(options: ShowOptions, *, logger: CLILogger) -> str:
    """Return the JSON document ``install`` would write for ``options.package_type``.

    Raises:
        CLIError: Raised when package metadata is malformed.
    """

    try:
        plan = plan_installation(options.root)
    except HookRelayError as exc:
        logger.fail(str(exc))
        raise CLIError.from_error(exc) from exc
    config = encode(plan.registry, options.package_type)
    if options.hook is not None:
        config = PersistedConfig(hooks={options.hook: config.hooks.get(options.hook, {})})
    return dumps(config)


__all__ = ["emit_install_summary", "perform_dispatch", "perform_installation", "render_configuration"]
