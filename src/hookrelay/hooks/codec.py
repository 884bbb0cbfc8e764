# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Encode registries into per-package configurations and persist them as JSON."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from ..errors import ConfigParseError
from .aggregation import HookRegistry
from .models import DEFAULT_PACKAGE_TYPE, PersistedConfig
from .names import GIT_HOOK_NAMES

COMMENT_KEY: Final[str] = "_comment"
HOOKS_KEY: Final[str] = "hooks"
GENERATOR_NOTICE: Final[str] = "hookrelay configuration file. Do not edit, this file is generated automatically."


def encode(
    registry: HookRegistry,
    package_type: str,
    hook_names: Sequence[str] = GIT_HOOK_NAMES,
) -> PersistedConfig:
    """Return the view of ``registry`` that applies to ``package_type``.

    For each priority the exact ``package_type`` bucket wins; otherwise the
    ``default`` bucket is used; otherwise the priority is omitted. Every name
    in ``hook_names`` is present in the result, empty when nothing applies.

    Args:
        registry: Aggregated declarations.
        package_type: Type of the package the configuration is written for.
        hook_names: Hook names to emit, in output order.

    Returns:
        PersistedConfig: Ascending-priority configuration for the package.
    """

    hooks: dict[str, dict[int, list[str]]] = {}
    for hook_name in hook_names:
        resolved: dict[int, list[str]] = {}
        entries = registry.get_entries(hook_name)
        for priority in sorted(entries):
            by_type = entries[priority]
            actions = by_type.get(package_type)
            if actions is None:
                actions = by_type.get(DEFAULT_PACKAGE_TYPE)
            if actions:
                resolved[priority] = [str(action) for action in actions]
        hooks[hook_name] = resolved
    return PersistedConfig(hooks=hooks)


def dumps(config: PersistedConfig, generated_at: datetime | None = None) -> str:
    """Serialise ``config`` to the persisted JSON document.

    The header comment carries the generation timestamp; everything after it is
    a pure function of ``config``.
    """

    timestamp = (generated_at or datetime.now(UTC)).strftime("%Y/%m/%d %H:%M:%S")
    document = {
        COMMENT_KEY: f"{GENERATOR_NOTICE} Timestamp: {timestamp}",
        HOOKS_KEY: {
            hook_name: {str(priority): list(references) for priority, references in priorities.items()}
            for hook_name, priorities in config.hooks.items()
        },
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def loads(text: str) -> PersistedConfig:
    """Decode a persisted document, ignoring its header comment.

    Raises:
        ConfigParseError: If the text is not JSON or does not match the
            ``hook -> priority -> [reference]`` structure.
    """

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"Hook configuration is not valid JSON: {exc}") from exc
    if not isinstance(document, dict) or not isinstance(document.get(HOOKS_KEY), dict):
        raise ConfigParseError(f'Hook configuration must be an object with a "{HOOKS_KEY}" table')
    try:
        return PersistedConfig.model_validate({HOOKS_KEY: document[HOOKS_KEY]}, strict=False)
    except ValidationError as exc:
        raise ConfigParseError(f"Malformed hook configuration: {exc}") from exc


def write_config(path: Path, config: PersistedConfig, generated_at: datetime | None = None) -> None:
    """Atomically replace ``path`` with the serialised ``config``.

    The document is written to a sibling temporary file and renamed into
    place so a concurrently starting hook never reads a partial file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps(config, generated_at)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(payload)
        os.replace(handle.name, path)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise


def read_config(path: Path) -> PersistedConfig:
    """Return the configuration persisted at ``path``.

    Raises:
        ConfigParseError: If the file is missing, unreadable or malformed.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigParseError(f"Unable to read hook configuration {path}: {exc}") from exc
    return loads(text)


__all__ = ["COMMENT_KEY", "HOOKS_KEY", "dumps", "encode", "loads", "read_config", "write_config"]
