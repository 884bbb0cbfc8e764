# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Action contract, registry, and built-in actions."""

from __future__ import annotations

from .base import Action, ActionContext, BaseAction, FunctionAction
from .builtin import ConflictMarkers, LargeFiles
from .registry import ACTION_ENTRY_POINT_GROUP, ActionFactory, ActionRegistry, class_factory, default_registry

__all__ = [
    "ACTION_ENTRY_POINT_GROUP",
    "Action",
    "ActionContext",
    "ActionFactory",
    "ActionRegistry",
    "BaseAction",
    "ConflictMarkers",
    "FunctionAction",
    "LargeFiles",
    "class_factory",
    "default_registry",
]
