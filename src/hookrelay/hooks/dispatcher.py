# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the actions registered for a git hook and aggregate their exit codes."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Final

from ..actions.base import Action, ActionContext
from ..actions.registry import ActionRegistry, default_registry
from ..errors import ConfigurationError, DispatchError
from ..git import GitClient
from ..logging import ok
from ..paths import ProjectPaths
from .codec import read_config
from .models import ActionRef, DispatchResult, PersistedConfig, clamp_exit_code

LOGGER = logging.getLogger(__name__)

SUCCESS_MESSAGE: Final[str] = "All {count} {hook} action(s) passed. Nice work!"

Reporter = Callable[[str], None]


def _default_reporter(message: str) -> None:
    ok(message, use_emoji=True)


def coerce_exit_code(ref: ActionRef, value: object) -> int:
    """Return the sub-exit-code represented by an entry method's return value.

    ``None`` and ``True`` mean success, ``False`` means failure (``1``) and
    integers are clamped into ``[0, 255]``.

    Raises:
        DispatchError: If ``value`` is of any other type.
    """

    if value is None:
        return 0
    if isinstance(value, bool):
        return 0 if value else 1
    if isinstance(value, int):
        return clamp_exit_code(value)
    raise DispatchError(f"Action {ref} returned {value!r}; expected an integer exit code")


class Dispatcher:
    """Execute the ordered actions of one hook from a persisted configuration.

    Actions run strictly sequentially. Every registered action runs even when
    an earlier one reports failure; the aggregate exit code is the highest
    sub-exit-code observed. An exception escaping an action propagates
    immediately, skipping its ``shutdown`` and every later action. Every
    reference is parsed and every action built, with its entry method looked
    up, before the first one runs.
    """

    def __init__(
        self,
        actions: ActionRegistry | None = None,
        *,
        git: GitClient | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Create a dispatcher.

        Args:
            actions: Registry resolving action keys; defaults to :func:`default_registry`.
            git: Optional git collaborator handed to every action.
            reporter: Callable receiving the success banner.
        """

        self._actions = actions if actions is not None else default_registry()
        self._git = git
        self._reporter = reporter or _default_reporter

    def run(
        self,
        hook_name: str,
        config: PersistedConfig,
        project_root: Path,
        vendor_dir: Path,
    ) -> DispatchResult:
        """Run every action registered for ``hook_name`` in ``config``.

        Args:
            hook_name: Git hook being executed.
            config: Persisted configuration of the repository.
            project_root: Repository working tree.
            vendor_dir: Shared vendor directory passed to each action.

        Returns:
            DispatchResult: Number of actions executed and the aggregate exit code.

        Raises:
            ConfigurationError: If a reference is malformed or names an unknown
                action or method.
        """

        if hook_name not in config.hooks:
            LOGGER.debug("hook %s not configured; nothing to run", hook_name)
            return DispatchResult(actions_executed=0, exit_code=0)

        context = ActionContext(hook_name=hook_name, project_root=project_root, vendor_dir=vendor_dir, git=self._git)
        references = self._ordered_references(hook_name, config)
        prepared = [(priority, ref, *self._prepare(ref, context)) for priority, ref in references]
        executed = 0
        exit_code = 0
        for priority, ref, action, entry in prepared:
            LOGGER.debug("running %s for %s at priority %d", ref, hook_name, priority)
            action.init()
            status = coerce_exit_code(ref, entry())
            action.shutdown()
            executed += 1
            exit_code = max(exit_code, status)
            if status:
                LOGGER.debug("%s reported exit code %d", ref, status)

        if executed and exit_code == 0:
            self._reporter(SUCCESS_MESSAGE.format(count=executed, hook=hook_name))
        return DispatchResult(actions_executed=executed, exit_code=exit_code)

    def _ordered_references(self, hook_name: str, config: PersistedConfig) -> list[tuple[int, ActionRef]]:
        priorities = config.priorities(hook_name)
        if priorities != sorted(priorities):
            LOGGER.warning("priorities for %s are not ascending in the configuration; re-sorting", hook_name)
        parsed = [(priority, ActionRef.parse(raw)) for priority, raw in config.iter_references(hook_name)]
        return sorted(parsed, key=lambda item: item[0])

    def _prepare(self, ref: ActionRef, context: ActionContext) -> tuple[Action, Callable[[], object]]:
        action = self._actions.create(ref.target, context)
        return action, _resolve_entry(action, ref)


def _resolve_entry(action: Action, ref: ActionRef) -> Callable[[], object]:
    try:
        entry = getattr(action, ref.method)
    except AttributeError as exc:
        raise ConfigurationError(f"Action {ref.target!r} has no entry method {ref.method!r}") from exc
    if ref.method.startswith("_") or not callable(entry):
        raise ConfigurationError(f"{ref} is not a callable entry method")
    return entry


def activate_vendor_paths(paths: ProjectPaths) -> list[str]:
    """Put the import roots of the vendor packages at the front of ``sys.path``.

    Vendor packages are source trees rather than installed distributions, so
    their action classes are only importable once their roots are on the path.

    Returns:
        list[str]: Entries added, in ``sys.path`` order.
    """

    added = [str(root) for root in paths.vendor_import_roots() if str(root) not in sys.path]
    sys.path[:0] = added
    if added:
        LOGGER.debug("added vendor import roots %s", ", ".join(added))
    return added


def run_hook(
    hook_name: str,
    project_root: Path,
    *,
    config_path: Path | None = None,
    vendor_dir: Path | None = None,
    dispatcher: Dispatcher | None = None,
) -> DispatchResult:
    """Load the persisted configuration for ``project_root`` and dispatch ``hook_name``.

    The vendor packages are made importable first so references naming their
    action classes resolve.

    Raises:
        ConfigParseError: If the configuration is missing or malformed.
    """

    paths = ProjectPaths.for_root(project_root, vendor_dir=vendor_dir)
    config = read_config(config_path or paths.config_file)
    activate_vendor_paths(paths)
    return (dispatcher or Dispatcher()).run(hook_name, config, paths.root, paths.vendor_dir)


def main(hook_path: str, cwd: str, vendor_dir: str | None = None) -> int:
    """Entry point of generated hook scripts; return the process exit code.

    Args:
        hook_path: ``argv[0]`` of the hook script, whose basename is the hook name.
        cwd: Working directory git ran the hook from.
        vendor_dir: Vendor directory resolved by the script.
    """

    hook_name = Path(hook_path).name
    result = run_hook(
        hook_name,
        Path(cwd),
        vendor_dir=Path(vendor_dir) if vendor_dir else None,
    )
    return result.exit_code


__all__ = ["SUCCESS_MESSAGE", "Dispatcher", "activate_vendor_paths", "coerce_exit_code", "main", "run_hook"]
