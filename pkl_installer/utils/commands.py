"""
External Command Runner

Runs editor and toolchain commands without a shell, logging each command
line before it executes so a run reads like a traced shell session.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Sequence, Union


logger = logging.getLogger(__name__)

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """
    Outcome of an external command.

    Attributes:
        args: Argument vector that was executed
        returncode: Process exit status
        stdout: Captured standard output (empty when not captured)
        stderr: Captured standard error, or the launch error message
    """
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def split_command(command: Union[str, Sequence[str]]) -> List[str]:
    """Turn a configured command string into an argument vector."""
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def run_command(command: Union[str, Sequence[str]], capture: bool = True) -> CommandResult:
    """
    Run a command and return its result.

    Args:
        command: Command string or argument vector
        capture: Whether to capture stdout/stderr instead of passing them through

    Returns:
        CommandResult: Exit status and captured output
    """
    args = split_command(command)
    if not args:
        return CommandResult(args=args, returncode=COMMAND_NOT_FOUND, stderr="Empty command")

    logger.info(f"+ {shlex.join(args)}")

    try:
        completed = subprocess.run(args, capture_output=capture, text=True)
    except FileNotFoundError:
        message = f"Command not found: {args[0]}"
        logger.error(message)
        return CommandResult(args=args, returncode=COMMAND_NOT_FOUND, stderr=message)
    except OSError as e:
        message = f"Failed to run {args[0]}: {e}"
        logger.error(message)
        return CommandResult(args=args, returncode=1, stderr=message)

    result = CommandResult(
        args=args,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )

    if not result.success:
        logger.error(f"Command exited with status {result.returncode}: {shlex.join(args)}")
        if result.stderr.strip():
            logger.error(result.stderr.strip())

    return result
