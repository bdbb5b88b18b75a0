"""
Toolchain activation run before the extension is installed.

The Pkl extension needs a Java runtime; by default `mise use java` makes
one available in the current project.
"""

import logging
from typing import Callable

from ..utils.commands import CommandResult, run_command, split_command


class ToolchainActivator:
    """Runs the configured toolchain command, if enabled."""

    def __init__(self, command: str = 'mise use java', enabled: bool = True,
                 runner: Callable[..., CommandResult] = run_command):
        self.logger = logging.getLogger(__name__)
        self.command = split_command(command)
        self.enabled = enabled and bool(self.command)
        self.runner = runner

    def activate(self) -> CommandResult:
        """
        Activate the toolchain.

        Returns:
            CommandResult: Outcome of the command (a zero-status result when disabled)
        """
        if not self.enabled:
            self.logger.info("Toolchain activation disabled, skipping")
            return CommandResult(args=self.command, returncode=0)
        return self.runner(self.command, capture=False)
