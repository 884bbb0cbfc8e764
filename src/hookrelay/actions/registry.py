# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Map action keys from persisted references to action factories.

Resolution tries, in order, explicit registrations, the
``hookrelay.actions`` entry-point group, and finally a dotted import path
(``package.module.ClassName``). A key that none of these resolve is a
configuration error: the persisted configuration names an action the
running environment cannot provide.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from functools import lru_cache
from importlib import import_module, metadata
from typing import Final, TypeAlias, TypeVar

from ..errors import ConfigurationError
from .base import Action, ActionContext, BaseAction, EntryCallable, FunctionAction
from .builtin import register_builtin_actions

LOGGER = logging.getLogger(__name__)

ACTION_ENTRY_POINT_GROUP: Final[str] = "hookrelay.actions"

ActionFactory: TypeAlias = Callable[[ActionContext], Action]
ActionT = TypeVar("ActionT", bound=type)


def class_factory(action_cls: type) -> ActionFactory:
    """Return a factory constructing ``action_cls`` from an :class:`ActionContext`.

    Subclasses of :class:`BaseAction` also receive the context's git
    collaborator; other classes are called with ``(hook, root, vendor_dir)``.
    """

    if issubclass(action_cls, BaseAction):

        def _build_base(context: ActionContext) -> Action:
            return action_cls(context.hook_name, context.project_root, context.vendor_dir, git=context.git)

        return _build_base

    def _build(context: ActionContext) -> Action:
        return action_cls(context.hook_name, context.project_root, context.vendor_dir)

    return _build


def _coerce_factory(key: str, target: object) -> ActionFactory:
    if inspect.isclass(target):
        return class_factory(target)
    if callable(target):
        return target  # type: ignore[return-value]
    raise ConfigurationError(f"Action {key!r} resolved to {target!r}, which is neither a class nor a factory")


class ActionRegistry:
    """Resolve action keys to factories building :class:`Action` instances."""

    def __init__(self, *, use_entry_points: bool = True, allow_imports: bool = True) -> None:
        """Create an empty registry.

        Args:
            use_entry_points: Whether unknown keys are looked up in the
                ``hookrelay.actions`` entry-point group.
            allow_imports: Whether unknown dotted keys are imported.
        """

        self._factories: dict[str, ActionFactory] = {}
        self._use_entry_points = use_entry_points
        self._allow_imports = allow_imports

    def register(self, key: str, target: type | ActionFactory) -> None:
        """Register ``target`` (an action class or factory) under ``key``."""

        if key in self._factories:
            LOGGER.warning("Action %r already registered, overwriting", key)
        self._factories[key] = _coerce_factory(key, target)

    def action(self, key: str) -> Callable[[ActionT], ActionT]:
        """Return a class decorator registering the decorated class under ``key``."""

        def decorator(action_cls: ActionT) -> ActionT:
            self.register(key, action_cls)
            return action_cls

        return decorator

    def register_functions(
        self,
        key: str,
        entries: Mapping[str, EntryCallable],
        *,
        on_init: Callable[[ActionContext], None] | None = None,
        on_shutdown: Callable[[ActionContext], None] | None = None,
    ) -> None:
        """Register an action assembled from plain callables.

        Args:
            key: Action key used in references.
            entries: Entry-method names mapped to callables taking the context.
            on_init: Optional setup callable.
            on_shutdown: Optional teardown callable.
        """

        frozen_entries = dict(entries)

        def _build(context: ActionContext) -> Action:
            action = FunctionAction(context=context, entries=frozen_entries)
            if on_init is not None:
                action.on_init = on_init
            if on_shutdown is not None:
                action.on_shutdown = on_shutdown
            return action

        self.register(key, _build)

    def unregister(self, key: str) -> bool:
        """Remove ``key``; return whether it was registered."""

        return self._factories.pop(key, None) is not None

    def keys(self) -> tuple[str, ...]:
        """Return explicitly registered keys in registration order."""

        return tuple(self._factories)

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def resolve(self, key: str) -> ActionFactory:
        """Return the factory for ``key``.

        Raises:
            ConfigurationError: If ``key`` cannot be resolved.
        """

        factory = self._factories.get(key)
        if factory is not None:
            return factory
        if self._use_entry_points:
            factory = self._from_entry_points(key)
            if factory is not None:
                self._factories[key] = factory
                return factory
        if self._allow_imports and "." in key:
            factory = self._from_import_path(key)
            self._factories[key] = factory
            return factory
        raise ConfigurationError(f"Unknown action {key!r}: no registration, entry point or importable class")

    def create(self, key: str, context: ActionContext) -> Action:
        """Instantiate the action registered under ``key`` for ``context``."""

        return self.resolve(key)(context)

    @staticmethod
    def _from_entry_points(key: str) -> ActionFactory | None:
        selected: Iterable[metadata.EntryPoint] = metadata.entry_points(group=ACTION_ENTRY_POINT_GROUP)
        for entry in selected:
            if entry.name != key:
                continue
            try:
                target = entry.load()
            except (AttributeError, ImportError) as exc:
                raise ConfigurationError(f"Entry point for action {key!r} failed to load: {exc}") from exc
            return _coerce_factory(key, target)
        return None

    @staticmethod
    def _from_import_path(key: str) -> ActionFactory:
        module_name, _, attribute = key.rpartition(".")
        try:
            module = import_module(module_name)
        except (ImportError, ValueError, TypeError) as exc:
            raise ConfigurationError(f"Unknown action {key!r}: cannot import module {module_name!r}") from exc
        try:
            target = getattr(module, attribute)
        except AttributeError as exc:
            raise ConfigurationError(f"Unknown action {key!r}: {module_name!r} has no attribute {attribute!r}") from exc
        return _coerce_factory(key, target)


@lru_cache(maxsize=1)
def default_registry() -> ActionRegistry:
    """Return the registry used by generated hook scripts, holding the built-in actions."""

    registry = ActionRegistry()
    register_builtin_actions(registry)
    return registry


__all__ = [
    "ACTION_ENTRY_POINT_GROUP",
    "ActionFactory",
    "ActionRegistry",
    "class_factory",
    "default_registry",
]
