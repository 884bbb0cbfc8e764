# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the executable scripts git invokes for each hook."""

from __future__ import annotations

import sys
from pathlib import Path
from string import Template
from typing import Final

SCRIPT_MARKER: Final[str] = "# hookrelay-generated"

_TEMPLATE: Final[Template] = Template(
    """#!$executable
$marker: do not edit, regenerate with `hookrelay install`.
import os
import sys

from hookrelay.hooks.dispatcher import main

VENDOR_DIR = os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(__file__)), "$vendor"))

sys.exit(main(sys.argv[0], os.getcwd(), VENDOR_DIR))
"""
)


def render_hook_script(relative_vendor_dir: str, *, executable: str | None = None) -> str:
    """Return the source of a hook script.

    The script takes the hook name from ``argv[0]`` and the project root from
    the working directory git runs it in, so one body serves every hook.

    Args:
        relative_vendor_dir: Vendor directory relative to the hooks directory.
        executable: Interpreter used in the shebang; defaults to the running one.
    """

    return _TEMPLATE.substitute(
        executable=executable or sys.executable,
        marker=SCRIPT_MARKER,
        vendor=relative_vendor_dir,
    )


def is_generated_script(path: Path) -> bool:
    """Return whether ``path`` is a hook script previously written by hookrelay."""

    try:
        with path.open(encoding="utf-8", errors="replace") as handle:
            head = [handle.readline() for _ in range(2)]
    except (FileNotFoundError, IsADirectoryError):
        return False
    return any(line.startswith(SCRIPT_MARKER) for line in head)


__all__ = ["SCRIPT_MARKER", "is_generated_script", "render_hook_script"]
