# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hook aggregation, persistence, installation, and dispatch services."""

from __future__ import annotations

from .aggregation import HookRegistry, aggregate, parse_declarations
from .codec import dumps, encode, loads, read_config, write_config
from .dispatcher import Dispatcher, run_hook
from .installer import install_hooks, plan_installation, resolve_package_type
from .models import ActionRef, DispatchResult, HookBinding, InstallResult, PersistedConfig
from .names import GIT_HOOK_NAMES, available_hooks, is_supported

__all__ = [
    "GIT_HOOK_NAMES",
    "ActionRef",
    "DispatchResult",
    "Dispatcher",
    "HookBinding",
    "HookRegistry",
    "InstallResult",
    "PersistedConfig",
    "aggregate",
    "available_hooks",
    "dumps",
    "encode",
    "install_hooks",
    "is_supported",
    "loads",
    "parse_declarations",
    "plan_installation",
    "read_config",
    "resolve_package_type",
    "run_hook",
    "write_config",
]
