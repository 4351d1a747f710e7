"""Synchronous shell command execution with inherited output streams."""

import logging
import subprocess
from pathlib import Path

from poly_watcher.errors import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run build and dependency commands through the shell.

    Output is not captured: the child writes straight to the watcher's
    stdout/stderr so build output shows up live in the same console.
    """

    def __init__(self, cwd: str | Path | None = None):
        """Initialize runner.

        Args:
            cwd: Working directory for commands (None = current directory)
        """
        self.cwd = cwd

    def run(self, command: str) -> None:
        """Run a command and block until it exits.

        An empty command is a successful no-op.

        Args:
            command: Shell command line

        Raises:
            CommandError: If the command exits non-zero or cannot be started
        """
        if not command or not command.strip():
            return

        logger.debug(f"Running: {command}")
        try:
            completed = subprocess.run(command, shell=True, cwd=self.cwd)
        except OSError as e:
            raise CommandError(command, None, str(e)) from e

        if completed.returncode != 0:
            raise CommandError(command, completed.returncode)
