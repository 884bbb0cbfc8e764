# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Actions shipped with hookrelay and registered on the default registry."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..logging import fail
from .base import BaseAction

if TYPE_CHECKING:
    from .registry import ActionRegistry

CONFLICT_MARKER_RE: Final[re.Pattern[str]] = re.compile(r"^(<{7}|={7}|>{7})(?: |$)", re.MULTILINE)
MAX_FILE_SIZE_ENV: Final[str] = "HOOKRELAY_MAX_FILE_SIZE"
DEFAULT_MAX_FILE_SIZE: Final[int] = 5 * 1024 * 1024


class ConflictMarkers(BaseAction):
    """Reject commits that still contain merge conflict markers."""

    def check(self) -> int:
        offenders: list[Path] = []
        for path in self.changed_files():
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except (FileNotFoundError, IsADirectoryError):
                continue
            if CONFLICT_MARKER_RE.search(text):
                offenders.append(path)
        for path in offenders:
            fail(f"Merge conflict markers found in {path.relative_to(self.root)}", use_emoji=True)
        return 1 if offenders else 0


class LargeFiles(BaseAction):
    """Reject staged files larger than a configurable size limit."""

    def init(self) -> None:
        raw = os.environ.get(MAX_FILE_SIZE_ENV)
        self.limit = int(raw) if raw and raw.isdigit() else DEFAULT_MAX_FILE_SIZE

    def check(self) -> int:
        status = 0
        for path in self.changed_files():
            try:
                size = path.stat().st_size
            except FileNotFoundError:
                continue
            if size > self.limit:
                fail(
                    f"{path.relative_to(self.root)} is {size} bytes, above the {self.limit} byte limit",
                    use_emoji=True,
                )
                status = 1
        return status


def register_builtin_actions(registry: ActionRegistry) -> None:
    """Register every built-in action on ``registry`` under its class name."""

    registry.register("ConflictMarkers", ConflictMarkers)
    registry.register("LargeFiles", LargeFiles)


__all__ = [
    "DEFAULT_MAX_FILE_SIZE",
    "MAX_FILE_SIZE_ENV",
    "ConflictMarkers",
    "LargeFiles",
    "register_builtin_actions",
]
