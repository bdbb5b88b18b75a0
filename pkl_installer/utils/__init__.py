"""
Utils package __init__.py
"""

from .error_handling import ErrorHandler, setup_global_error_handling
from .commands import CommandResult, run_command, split_command
from .downloader import FileDownloader, DownloadResult, DownloadProgress

__all__ = [
    'ErrorHandler', 'setup_global_error_handling',
    'CommandResult', 'run_command', 'split_command',
    'FileDownloader', 'DownloadResult', 'DownloadProgress'
]
