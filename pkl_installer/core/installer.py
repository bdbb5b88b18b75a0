"""
Extension Installation Workflow

Runs the install sequence for the editor extension:
resolve the release version, download the .vsix, activate the toolchain,
install it through the editor CLI and remove the downloaded file.

The sequence is strictly linear: the first failing step ends the run.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .editor import EditorCLI
from .github_client import GitHubAPIClient, compare_versions
from .toolchain import ToolchainActivator
from ..utils.downloader import FileDownloader, DownloadProgress


@dataclass
class InstallOptions:
    """
    Per-run options, overriding stored configuration.

    Attributes:
        version: Release tag to install, or None for the latest release
        force: Install even if the editor already has this version
        keep_download: Keep the .vsix after installing (None uses the config)
        download_dir: Where to put the .vsix (None uses the config)
        skip_toolchain: Do not run the toolchain command
    """
    version: Optional[str] = None
    force: bool = False
    keep_download: Optional[bool] = None
    download_dir: Optional[Path] = None
    skip_toolchain: bool = False


@dataclass
class InstallResult:
    """
    Outcome of an installation run.

    Attributes:
        success: Whether the run completed
        message: Summary for the user
        version: Resolved release tag, if it got that far
        artifact_path: Downloaded file, if one still exists
        skipped: True when the version was already installed
    """
    success: bool
    message: str
    version: Optional[str] = None
    artifact_path: Optional[Path] = None
    skipped: bool = False


class ExtensionInstaller:
    """
    Installs the latest (or a pinned) release of the editor extension.
    """

    def __init__(self,
                 config_manager: ConfigManager,
                 options: Optional[InstallOptions] = None,
                 github_client: Optional[GitHubAPIClient] = None,
                 downloader: Optional[FileDownloader] = None,
                 editor: Optional[EditorCLI] = None,
                 toolchain: Optional[ToolchainActivator] = None):
        self.config_manager = config_manager
        self.options = options or InstallOptions()
        self.logger = logging.getLogger(__name__)

        self.github_client = github_client or GitHubAPIClient(
            repo_owner=config_manager.get_repo_owner(),
            repo_name=config_manager.get_repo_name(),
            github_token=config_manager.get_github_token()
        )
        self.downloader = downloader or FileDownloader()
        self.editor = editor or EditorCLI(config_manager.get_editor_command())
        self.toolchain = toolchain or ToolchainActivator(
            command=config_manager.get_toolchain_command(),
            enabled=config_manager.is_toolchain_enabled()
        )

        self.display_name = config_manager.get_repo_name()

    def run(self) -> InstallResult:
        """Main installation workflow."""
        # Step 1: Resolve the release version
        version = self._resolve_version()
        if not version:
            return self._fail(f"Failed to get latest {self.display_name} release information")

        # Step 2: Build the download URL and filename
        asset_name = self.config_manager.get_asset_name(version)
        download_url = self.github_client.build_download_url(version, asset_name)
        self.logger.debug(f"Download URL: {download_url}")

        if not self.options.force and self._is_already_installed(version):
            message = f"{self.display_name} extension {version} is already installed"
            self.logger.info(message)
            return InstallResult(success=True, message=message, version=version, skipped=True)

        # Step 3: Download the artifact
        self.logger.info(f"Downloading {self.display_name} extension version: {version}")
        download_dir = self.options.download_dir or self.config_manager.get_download_dir()
        result = self.downloader.download_file(
            download_url, Path(download_dir), filename=asset_name,
            progress_callback=self._log_progress
        )
        if not result.success:
            return self._fail(
                f"Failed to download {asset_name}: {result.error_message}", version=version
            )
        artifact_path = result.file_path

        if not self._verify_artifact(version, asset_name, artifact_path):
            self.downloader.cleanup_partial_download(artifact_path)
            return self._fail(f"Checksum verification failed for {asset_name}", version=version)

        # Step 4: Make the toolchain available
        if not self.options.skip_toolchain:
            toolchain_result = self.toolchain.activate()
            if not toolchain_result.success:
                return self._fail(
                    f"Toolchain activation failed (exit status {toolchain_result.returncode})",
                    version=version, artifact_path=artifact_path
                )

        # Step 5: Install through the editor CLI
        self.logger.info(f"Installing {self.display_name} extension...")
        install_result = self.editor.install_extension(artifact_path, force=self.options.force)
        if not install_result.success:
            return self._fail(
                f"Editor failed to install {asset_name} (exit status {install_result.returncode})",
                version=version, artifact_path=artifact_path
            )

        # Step 6: Remove the downloaded file
        keep_download = self.options.keep_download
        if keep_download is None:
            keep_download = self.config_manager.get_keep_download()

        if keep_download:
            self.logger.info(f"Keeping downloaded file: {artifact_path}")
        else:
            self.logger.info("Cleaning up downloaded file...")
            try:
                artifact_path.unlink()
            except OSError as e:
                return self._fail(
                    f"Failed to remove {artifact_path}: {e}",
                    version=version, artifact_path=artifact_path
                )
            artifact_path = None

        self.config_manager.set_last_installed_version(version)

        message = f"{self.display_name} extension {version} installed successfully!"
        self.logger.info(message)
        return InstallResult(success=True, message=message, version=version,
                             artifact_path=artifact_path)

    def _resolve_version(self) -> Optional[str]:
        if self.options.version:
            self.logger.info(f"Using requested version: {self.options.version}")
            return self.options.version
        return self.github_client.get_latest_version()

    def _is_already_installed(self, version: str) -> bool:
        installed = self.editor.installed_version(self.config_manager.get_extension_id())
        if installed is None:
            return False
        self.logger.debug(f"Installed version: {installed}")
        return compare_versions(installed, version) == 0

    def _verify_artifact(self, version: str, asset_name: str, artifact_path: Path) -> bool:
        """
        Check the download against the digest GitHub publishes, when there is one.

        Returns:
            bool: False only when a digest exists and does not match
        """
        if self.options.version:
            release = self.github_client.get_release_by_tag(version)
        else:
            release = self.github_client.get_latest_release()
        if release is None:
            self.logger.debug("Release metadata unavailable, skipping checksum verification")
            return True

        asset = self.github_client.find_asset(release, asset_name)
        expected = asset.sha256() if asset else None
        if not expected:
            self.logger.debug(f"No published checksum for {asset_name}")
            return True

        return self.downloader.verify_file_integrity(artifact_path, expected, 'sha256')

    def _log_progress(self, progress: DownloadProgress) -> None:
        if progress.total_bytes:
            self.logger.debug(
                f"Downloaded {progress.downloaded_bytes}/{progress.total_bytes} bytes "
                f"({progress.percentage:.0f}%)"
            )
        else:
            self.logger.debug(f"Downloaded {progress.downloaded_bytes} bytes")

    def _fail(self, message: str, version: Optional[str] = None,
              artifact_path: Optional[Path] = None) -> InstallResult:
        self.logger.error(message)
        if artifact_path is not None and artifact_path.exists():
            self.logger.error(f"Downloaded file left in place: {artifact_path}")
        return InstallResult(success=False, message=message, version=version,
                             artifact_path=artifact_path)
