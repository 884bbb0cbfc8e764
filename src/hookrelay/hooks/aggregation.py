# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collect hook declarations from packages into a single registry."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeAlias

from ..errors import ConfigurationError
from ..packages import PackageInfo
from .models import DEFAULT_PACKAGE_TYPE, DEFAULT_PRIORITY, ActionRef, HookBinding
from .names import is_supported

LOGGER = logging.getLogger(__name__)

PackageBuckets: TypeAlias = dict[str, list[ActionRef]]
PriorityBuckets: TypeAlias = dict[int, PackageBuckets]


class HookRegistry:
    """Append-only store of ``hook -> priority -> package type -> actions``.

    A registry is built for one aggregation pass and discarded once every
    package configuration has been encoded. Entries sharing a key keep their
    insertion order and are never de-duplicated.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PriorityBuckets] = {}

    def add_entry(self, hook_name: str, package_type: str, action: ActionRef, priority: int) -> None:
        """Append ``action`` to ``[hook_name][priority][package_type]``."""

        by_priority = self._entries.setdefault(hook_name, {})
        by_type = by_priority.setdefault(priority, {})
        by_type.setdefault(package_type, []).append(action)

    def add_binding(self, binding: HookBinding) -> None:
        """Append every action of ``binding`` in declaration order."""

        for action in binding.actions:
            self.add_entry(binding.hook_name, binding.package_type, action, binding.priority)

    def get_entries(self, hook_name: str) -> PriorityBuckets:
        """Return a copy of the entries for ``hook_name``; ``{}`` when unknown."""

        return copy.deepcopy(self._entries.get(hook_name, {}))

    def hook_names(self) -> tuple[str, ...]:
        """Return hook names holding at least one entry, in first-seen order."""

        return tuple(self._entries)

    def __len__(self) -> int:
        return sum(
            len(actions)
            for by_priority in self._entries.values()
            for by_type in by_priority.values()
            for actions in by_type.values()
        )


def parse_hook_key(package_name: str, key: str) -> tuple[int, str]:
    """Split a ``"<priority>.<hook>"`` or ``"<hook>"`` declaration key.

    Raises:
        ConfigurationError: If the priority prefix is not an integer or the
            hook name is empty.
    """

    priority_text, separator, hook_name = key.partition(".")
    if not separator:
        priority_text, hook_name = str(DEFAULT_PRIORITY), key
    try:
        priority = int(priority_text)
    except ValueError as exc:
        raise ConfigurationError(
            f'Package {package_name}: hook key "{key}" must look like "<priority>.<hook>" or "<hook>"'
        ) from exc
    if not hook_name.strip():
        raise ConfigurationError(f'Package {package_name}: hook key "{key}" does not name a hook')
    return priority, hook_name.strip()


def parse_declarations(package_name: str, declarations: Mapping[str, Any]) -> list[HookBinding]:
    """Return the bindings declared by one package.

    Values are either a single ``"Target::method"`` reference, applying to the
    ``default`` package type, or a table mapping package types to references.
    TOML readers turn an unquoted ``10.pre-commit`` (or ``-5.pre-commit``) key
    into a nested ``{"10": {"pre-commit": ...}}`` table, so integer keys
    holding a table are flattened back into ``"<priority>.<hook>"`` keys.

    Args:
        package_name: Package owning the declarations, used in error messages.
        declarations: The package's ``hooks`` table.

    Returns:
        list[HookBinding]: Bindings in declaration order.

    Raises:
        ConfigurationError: If any key, value or action reference is malformed.
    """

    bindings: list[HookBinding] = []
    for key, value in _flatten_priority_tables(declarations):
        priority, hook_name = parse_hook_key(package_name, key)
        if isinstance(value, str):
            per_type: Mapping[str, Any] = {DEFAULT_PACKAGE_TYPE: value}
        elif isinstance(value, Mapping):
            per_type = value
        else:
            raise ConfigurationError(
                f'Package {package_name}: hook "{key}" must map to a reference string or a table of them'
            )
        for package_type, raw_reference in per_type.items():
            try:
                action = ActionRef.parse(raw_reference)
            except ConfigurationError as exc:
                raise ConfigurationError(f'Package {package_name}, hook "{key}": {exc}') from exc
            bindings.append(
                HookBinding(
                    hook_name=hook_name,
                    priority=priority,
                    package_type=str(package_type),
                    actions=(action,),
                )
            )
    return bindings


def _flatten_priority_tables(declarations: Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    for key, value in declarations.items():
        if isinstance(value, Mapping) and _is_priority(key):
            for hook_name, nested in value.items():
                yield f"{key}.{hook_name}", nested
        else:
            yield key, value


def _is_priority(key: str) -> bool:
    try:
        int(key)
    except ValueError:
        return False
    return True


def aggregate(packages: Iterable[PackageInfo]) -> HookRegistry:
    """Build a registry from every package's declarations, in walk order.

    All packages are parsed before anything is recorded so a malformed entry
    leaves no partially populated registry behind. Ties between packages at
    the same priority are broken by the order ``packages`` yields them.

    Raises:
        ConfigurationError: If any package declares a malformed entry.
    """

    parsed: list[tuple[str, list[HookBinding]]] = [
        (package.name, parse_declarations(package.name, package.settings.hooks)) for package in packages
    ]
    registry = HookRegistry()
    for package_name, bindings in parsed:
        for binding in bindings:
            if not is_supported(binding.hook_name):
                LOGGER.warning(
                    "package %s declares unknown git hook %r; it will never run",
                    package_name,
                    binding.hook_name,
                )
            LOGGER.debug(
                "adding %s to hook %s with priority %d for package type %s",
                ", ".join(str(action) for action in binding.actions),
                binding.hook_name,
                binding.priority,
                binding.package_type,
            )
            registry.add_binding(binding)
    return registry


__all__ = ["HookRegistry", "aggregate", "parse_declarations", "parse_hook_key"]
