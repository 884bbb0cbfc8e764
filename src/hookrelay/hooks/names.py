# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry helpers describing the git hooks hookrelay manages."""

from __future__ import annotations

from typing import Final

GIT_HOOK_NAMES: Final[tuple[str, ...]] = (
    "applypatch-msg",
    "pre-applypatch",
    "post-applypatch",
    "pre-commit",
    "prepare-commit-msg",
    "commit-msg",
    "post-commit",
    "pre-rebase",
    "post-checkout",
    "post-merge",
    "post-update",
    "pre-auto-gc",
    "post-rewrite",
    "pre-push",
)


def available_hooks() -> tuple[str, ...]:
    """Return the fixed sequence of supported git hook names.

    Returns:
        tuple[str, ...]: Supported git hook identifiers in persisted order.
    """

    return GIT_HOOK_NAMES


def is_supported(name: str) -> bool:
    """Return whether ``name`` identifies a supported hook.

    Args:
        name: Hook name supplied by the caller.

    Returns:
        bool: ``True`` when the hook is recognised by the registry.
    """

    return name in GIT_HOOK_NAMES


__all__ = ["GIT_HOOK_NAMES", "available_hooks", "is_supported"]
