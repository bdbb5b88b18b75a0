"""
pkl-vscode Installer - Command Line Entry Point

Downloads the latest pkl-vscode release from GitHub and installs it into
VS Code (or any editor with a compatible CLI).

Usage:
    python -m pkl_installer.main [options]

    Or if installed via pip:
    pkl-vscode-install [options]
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional, Sequence

from . import __version__


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='pkl-vscode-install',
        description='Download and install the latest pkl-vscode editor extension.'
    )
    parser.add_argument('--version', dest='release', metavar='TAG',
                        help='install this release tag instead of the latest')
    parser.add_argument('--force', action='store_true',
                        help='install even if the editor already has this version')
    parser.add_argument('--keep-download', action='store_true', default=None,
                        help='keep the downloaded .vsix file')
    parser.add_argument('--download-dir', type=Path, metavar='DIR',
                        help='directory for the downloaded .vsix (default: current directory)')
    parser.add_argument('--skip-toolchain', action='store_true',
                        help='do not run the toolchain command before installing')
    parser.add_argument('--editor', metavar='CMD',
                        help='editor CLI to use, e.g. code-insiders or codium')
    parser.add_argument('--token', metavar='TOKEN',
                        help='GitHub token for API requests (default: $GITHUB_TOKEN)')
    parser.add_argument('--check', action='store_true',
                        help='print the latest release version and exit')
    parser.add_argument('--config-dir', type=Path, metavar='DIR',
                        help='directory holding the installer configuration')
    parser.add_argument('--log-file', type=Path, metavar='FILE',
                        help='write the detailed log to FILE')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='show debug output')
    parser.add_argument('-V', '--installer-version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    from .utils.error_handling import setup_global_error_handling
    setup_global_error_handling(log_file=args.log_file, verbose=args.verbose)

    from .core.config import ConfigManager
    from .core.editor import EditorCLI
    from .core.github_client import GitHubAPIClient
    from .core.installer import ExtensionInstaller, InstallOptions

    logger = logging.getLogger(__name__)
    github_client = None

    try:
        config_manager = ConfigManager(config_dir=args.config_dir)

        github_client = GitHubAPIClient(
            repo_owner=config_manager.get_repo_owner(),
            repo_name=config_manager.get_repo_name(),
            github_token=args.token or config_manager.get_github_token()
        )

        if args.check:
            version = github_client.get_latest_version()
            if not version:
                return EXIT_FAILURE
            print(version)
            return EXIT_OK

        editor = EditorCLI(args.editor or config_manager.get_editor_command())
        options = InstallOptions(
            version=args.release,
            force=args.force,
            keep_download=args.keep_download,
            download_dir=args.download_dir,
            skip_toolchain=args.skip_toolchain
        )

        installer = ExtensionInstaller(
            config_manager, options,
            github_client=github_client,
            editor=editor
        )
        try:
            result = installer.run()
        finally:
            installer.downloader.close()
        return EXIT_OK if result.success else EXIT_FAILURE

    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    finally:
        if github_client is not None:
            github_client.close()


if __name__ == "__main__":
    sys.exit(main())
