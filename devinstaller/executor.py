"""Synchronous external command execution."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from . import logger
from .errors import CommandFailure


@dataclass(frozen=True)
class CommandResult:
    command: str
    exit_code: int
    lines: List[str]

    @property
    def output(self) -> str:
        return os.linesep.join(self.lines)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def shell_exit_code(returncode: int) -> int:
    """Report signal deaths as 128 + signal number, the way shells do."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class CommandExecutor:
    """Run shell command lines to completion and report them accurately.

    The executor never aborts anything itself; callers decide what a
    :class:`CommandFailure` means for the run.
    """

    def __init__(self, dry_run: bool = False, timeout: Optional[float] = None):
        self.dry_run = dry_run
        self.timeout = timeout

    def run(self, command: str) -> CommandResult:
        """Execute ``command`` through the shell, capturing combined output."""
        if self.dry_run:
            logger.info("[dry-run] %s", command)
            return CommandResult(command, 0, [])

        logger.debug("Running: %s", command)
        proc = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=self.timeout,
        )
        lines = (proc.stdout or '').splitlines()
        exit_code = shell_exit_code(proc.returncode)
        logger.debug("Exit %s: %s", exit_code, command)
        return CommandResult(command, exit_code, lines)

    def execute(self, command: str) -> str:
        """Run ``command`` and return its output, raising on non-zero exit."""
        result = self.run(command)
        if not result.ok:
            raise CommandFailure(command, result.exit_code, result.output)
        return result.output

    def succeeds(self, command: str) -> bool:
        """Return True when ``command`` exits 0; used for presence probes."""
        if self.dry_run:
            return False
        try:
            return self.run(command).ok
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Probe %r could not run: %s", command, exc)
            return False
