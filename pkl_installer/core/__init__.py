"""
Core package __init__.py
"""

from .config import ConfigManager
from .github_client import GitHubAPIClient, Release, ReleaseAsset, extract_tag_name, compare_versions
from .editor import EditorCLI
from .toolchain import ToolchainActivator
from .installer import ExtensionInstaller, InstallOptions, InstallResult

__all__ = [
    'ConfigManager',
    'GitHubAPIClient', 'Release', 'ReleaseAsset', 'extract_tag_name', 'compare_versions',
    'EditorCLI', 'ToolchainActivator',
    'ExtensionInstaller', 'InstallOptions', 'InstallResult'
]
