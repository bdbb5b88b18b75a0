"""
Configuration Manager for the pkl-vscode Installer

Handles persistent storage of user preferences including:
- Which GitHub repository and release asset to install
- The editor and toolchain commands to run
- Download location and the last installed version

Uses ConfigParser and stores configuration in the user's home directory.
"""

import os
import configparser
from pathlib import Path
from typing import Optional
import logging


TOKEN_ENV_VAR = 'GITHUB_TOKEN'


class ConfigManager:
    """
    Manages application configuration and persistent user preferences.

    The configuration file is stored in '~/pkl-vscode-installer' as
    'pkl_vscode_installer_config.ini' to maintain persistence across runs.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Directory holding the INI file (defaults to the user profile)
        """
        self.logger = logging.getLogger(__name__)

        self.config_dir = Path(config_dir) if config_dir is not None else Path.home() / 'pkl-vscode-installer'
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file = self.config_dir / 'pkl_vscode_installer_config.ini'

        # Interpolation off so asset templates keep their braces and percent signs verbatim
        self.config = configparser.ConfigParser(interpolation=None)

        self.defaults = {
            'extension': {
                'repo_owner': 'apple',
                'repo_name': 'pkl-vscode',
                'extension_id': 'apple.pkl-vscode',
                'asset_template': 'pkl-vscode-{version}.vsix'
            },
            'editor': {
                'command': 'code'
            },
            'toolchain': {
                'enabled': 'true',
                'command': 'mise use java'
            },
            'installation': {
                'download_dir': '',
                'keep_download': 'false',
                'last_installed_version': ''
            },
            'github': {
                'personal_access_token': ''
            }
        }

        self.load_config()

    def load_config(self) -> None:
        """
        Load configuration from file or create with default values.

        If the configuration file doesn't exist, it will be created
        with default values. If it exists but is corrupted, it will
        be backed up and recreated.
        """
        try:
            if self.config_file.exists():
                self.logger.debug(f"Loading configuration from {self.config_file}")
                self.config.read(self.config_file, encoding='utf-8')
                self._validate_config()
            else:
                self.logger.info("Configuration file not found, creating with defaults")
                self._create_default_config()

        except (configparser.Error, OSError) as e:
            self.logger.error(f"Error loading configuration: {e}")
            self._backup_corrupted_config()
            self.config = configparser.ConfigParser(interpolation=None)
            self._create_default_config()

    def _validate_config(self) -> None:
        """
        Validate that all required configuration sections and keys exist.

        Adds any missing sections or keys with default values.
        """
        config_updated = False

        for section_name, section_data in self.defaults.items():
            if not self.config.has_section(section_name):
                self.logger.info(f"Adding missing section: {section_name}")
                self.config.add_section(section_name)
                config_updated = True

            for key, default_value in section_data.items():
                if not self.config.has_option(section_name, key):
                    self.logger.info(f"Adding missing option: {section_name}.{key}")
                    self.config.set(section_name, key, default_value)
                    config_updated = True

        if config_updated:
            self.save_config()

    def _create_default_config(self) -> None:
        """Create configuration file with default values."""
        for section_name, section_data in self.defaults.items():
            self.config.add_section(section_name)
            for key, value in section_data.items():
                self.config.set(section_name, key, value)

        self.save_config()
        self.logger.info("Created default configuration")

    def _backup_corrupted_config(self) -> None:
        """Create a backup of corrupted configuration file."""
        if self.config_file.exists():
            backup_file = self.config_file.with_suffix('.ini.backup')
            try:
                self.config_file.replace(backup_file)
                self.logger.info(f"Backed up corrupted config to {backup_file}")
            except OSError as e:
                self.logger.error(f"Failed to backup corrupted config: {e}")

    def save_config(self) -> bool:
        """
        Save current configuration to file.

        Returns:
            bool: True if save was successful, False otherwise
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                self.config.write(f)

            self.logger.debug(f"Configuration saved to {self.config_file}")
            return True

        except (OSError, configparser.Error) as e:
            self.logger.error(f"Failed to save configuration: {e}")
            return False

    def _get(self, section: str, key: str) -> str:
        return self.config.get(section, key, fallback=self.defaults[section][key])

    def _get_bool(self, section: str, key: str) -> bool:
        try:
            return self.config.getboolean(section, key,
                                          fallback=self.defaults[section][key] == 'true')
        except ValueError:
            self.logger.warning(f"Invalid boolean for {section}.{key}, using default")
            return self.defaults[section][key] == 'true'

    # Extension settings

    def get_repo_owner(self) -> str:
        return self._get('extension', 'repo_owner')

    def get_repo_name(self) -> str:
        return self._get('extension', 'repo_name')

    def get_extension_id(self) -> str:
        return self._get('extension', 'extension_id')

    def get_asset_name(self, version: str) -> str:
        """
        Build the release asset filename for a version.

        Args:
            version: Release tag, e.g. "0.31.0"

        Returns:
            str: Asset filename, e.g. "pkl-vscode-0.31.0.vsix"
        """
        return self._get('extension', 'asset_template').replace('{version}', version)

    # Editor and toolchain settings

    def get_editor_command(self) -> str:
        return self._get('editor', 'command')

    def set_editor_command(self, command: str) -> None:
        self.config.set('editor', 'command', command)
        self.save_config()
        self.logger.info(f"Editor command updated to: {command}")

    def is_toolchain_enabled(self) -> bool:
        return self._get_bool('toolchain', 'enabled')

    def get_toolchain_command(self) -> str:
        return self._get('toolchain', 'command')

    # Installation settings

    def get_download_dir(self) -> Path:
        """
        Get the directory where the artifact is downloaded.

        Returns:
            Path: Configured directory, or the current working directory when unset
        """
        configured = self._get('installation', 'download_dir').strip()
        return Path(configured).expanduser() if configured else Path.cwd()

    def set_download_dir(self, path: str) -> None:
        self.config.set('installation', 'download_dir', path)
        self.save_config()
        self.logger.info(f"Download directory updated to: {path}")

    def get_keep_download(self) -> bool:
        return self._get_bool('installation', 'keep_download')

    def get_last_installed_version(self) -> str:
        """
        Get the last version this tool installed.

        Returns:
            str: The last installed version, empty string if none
        """
        return self._get('installation', 'last_installed_version')

    def set_last_installed_version(self, version: str) -> None:
        """
        Record the version of a successful install.

        Args:
            version: The installed release tag
        """
        self.config.set('installation', 'last_installed_version', version)
        self.save_config()
        self.logger.debug(f"Last installed version updated to: {version}")

    # GitHub settings

    def get_github_token(self) -> Optional[str]:
        """
        Get the GitHub token, preferring the GITHUB_TOKEN environment variable.

        Returns:
            str: Token, or None when neither source provides one
        """
        token = os.environ.get(TOKEN_ENV_VAR, '').strip()
        if token:
            return token
        stored = self._get('github', 'personal_access_token').strip()
        return stored or None

    def set_github_token(self, token: Optional[str]) -> None:
        self.config.set('github', 'personal_access_token', (token or '').strip())
        self.save_config()
        self.logger.info("GitHub token updated" if token else "GitHub token removed")
