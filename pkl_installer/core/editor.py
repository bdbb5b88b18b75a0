"""
Editor Command-Line Interface

Wraps the VS Code compatible `code` CLI used to install extensions and to
query which extensions (and versions) are already present.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..utils.commands import CommandResult, run_command, split_command


class EditorCLI:
    """
    Thin wrapper around an editor's extension management commands.

    Works with any editor exposing the VS Code CLI flags
    (code, code-insiders, codium, cursor).
    """

    def __init__(self, command: str = 'code',
                 runner: Callable[..., CommandResult] = run_command):
        """
        Initialize the editor wrapper.

        Args:
            command: Editor executable, optionally with leading arguments
            runner: Function used to execute commands
        """
        self.logger = logging.getLogger(__name__)
        self.command: List[str] = split_command(command)
        self.runner = runner

    def install_extension(self, vsix_path: Path, force: bool = False) -> CommandResult:
        """
        Install an extension package.

        Args:
            vsix_path: Path to the .vsix file
            force: Reinstall even if the same version is present

        Returns:
            CommandResult: Outcome of the editor command
        """
        args = self.command + ['--install-extension', str(vsix_path)]
        if force:
            args.append('--force')
        return self.runner(args, capture=False)

    def list_extensions(self) -> Optional[Dict[str, str]]:
        """
        List installed extensions with their versions.

        Returns:
            dict: Lower-cased extension id to version, or None if the editor failed
        """
        result = self.runner(self.command + ['--list-extensions', '--show-versions'])
        if not result.success:
            self.logger.warning("Could not list installed editor extensions")
            return None
        return parse_extension_list(result.stdout)

    def installed_version(self, extension_id: str) -> Optional[str]:
        """
        Get the installed version of an extension.

        Args:
            extension_id: Identifier such as "apple.pkl-vscode"

        Returns:
            str: Installed version, or None if not installed or unknown
        """
        extensions = self.list_extensions()
        if not extensions:
            return None
        return extensions.get(extension_id.lower())


def parse_extension_list(output: str) -> Dict[str, str]:
    """Parse `publisher.name@version` lines into a mapping."""
    extensions = {}
    for line in output.splitlines():
        line = line.strip()
        if not line or '@' not in line:
            continue
        extension_id, _, version = line.rpartition('@')
        if extension_id and version:
            extensions[extension_id.lower()] = version
    return extensions
