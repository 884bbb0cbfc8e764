# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while aggregating, persisting, and dispatching hooks."""

from __future__ import annotations


class HookRelayError(RuntimeError):
    """Base class for every error raised by hookrelay."""


class ConfigurationError(HookRelayError):
    """Raised when hook declarations or action references are malformed."""


class ConfigParseError(ConfigurationError):
    """Raised when a persisted hook configuration cannot be decoded."""


class InstallationError(HookRelayError):
    """Raised when hook scripts or configuration files cannot be written."""


class DispatchError(HookRelayError):
    """Raised when an action violates the dispatch contract."""


__all__ = [
    "ConfigParseError",
    "ConfigurationError",
    "DispatchError",
    "HookRelayError",
    "InstallationError",
]
