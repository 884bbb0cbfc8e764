# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the hookrelay commands."""

from __future__ import annotations

import typer

from ..hooks.names import available_hooks, is_supported
from ..hooks.models import DEFAULT_PACKAGE_TYPE
from ._cli_models import (
    CONFIG_OPTION,
    DEFAULT_ROOT,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    HOOK_ARGUMENT,
    HOOK_FILTER_OPTION,
    ROOT_OPTION,
    TYPE_OPTION,
    InstallOptions,
    RunOptions,
    ShowOptions,
)
from ._cli_services import emit_install_summary, perform_dispatch, perform_installation, render_configuration
from .shared import CONFIGURATION_EXIT_CODE, CLIError, build_cli_logger

app = typer.Typer(
    name="hookrelay",
    help="Aggregate git hook actions declared by a project and its dependencies.",
    no_args_is_help=True,
    add_completion=False,
)


@app.command("install")
def install_command(
    root: ROOT_OPTION = DEFAULT_ROOT,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Write hook scripts and configuration for every package of the workspace.

    Run this after installing or updating dependencies.
    """

    options = InstallOptions.from_cli(root, dry_run=dry_run, emoji=emoji)
    logger = build_cli_logger(emoji=options.emoji)
    try:
        result = perform_installation(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    emit_install_summary(result, options, logger=logger)
    raise typer.Exit(code=0)


@app.command("run")
def run_command(
    hook: HOOK_ARGUMENT,
    root: ROOT_OPTION = DEFAULT_ROOT,
    config: CONFIG_OPTION = None,
) -> None:
    """Dispatch the actions configured for HOOK, as git would."""

    options = RunOptions.from_cli(hook, root, config)
    logger = build_cli_logger(emoji=True)
    try:
        result = perform_dispatch(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=result.exit_code)


@app.command("show")
def show_command(
    root: ROOT_OPTION = DEFAULT_ROOT,
    hook: HOOK_FILTER_OPTION = None,
    package_type: TYPE_OPTION = DEFAULT_PACKAGE_TYPE,
) -> None:
    """Print the configuration a package of the given type would receive."""

    logger = build_cli_logger(emoji=True)
    if hook is not None and not is_supported(hook):
        logger.fail(f"Unknown git hook {hook!r}; see `hookrelay hooks`")
        raise typer.Exit(code=CONFIGURATION_EXIT_CODE)
    options = ShowOptions(root=root.resolve(), hook=hook, package_type=package_type)
    try:
        document = render_configuration(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    typer.echo(document, nl=False)


@app.command("hooks")
def hooks_command() -> None:
    """List the git hook names hookrelay installs scripts for."""

    for name in available_hooks():
        typer.echo(name)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
