# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; the wrapper never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess


@dataclass(slots=True)
class CommandOptions:
    """Command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` without a shell and return the completed process.

    The executable is resolved through :func:`shutil.which` so a missing binary
    surfaces as :class:`FileNotFoundError` naming the program.

    Args:
        args: Command and arguments.
        options: Execution options; defaults to :class:`CommandOptions`.

    Returns:
        CompletedProcess[str]: Completed process with captured output when requested.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        SubprocessExecutionError: If ``check`` is set and the command fails.
    """

    opts = options or CommandOptions()
    if not args:
        raise ValueError("command must not be empty")
    program = shutil.which(args[0])
    if program is None:
        raise FileNotFoundError(f"Executable not found: {args[0]}")
    completed = subprocess.run(  # nosec B603
        [program, *args[1:]],
        cwd=opts.cwd,
        env=dict(opts.env) if opts.env is not None else None,
        capture_output=opts.capture_output,
        text=opts.text,
        check=False,
    )
    if opts.check and completed.returncode != 0:
        raise SubprocessExecutionError(args, completed.returncode, completed.stdout, completed.stderr)
    return completed


__all__ = ["CommandOptions", "SubprocessExecutionError", "run_command"]
