"""
Error Handling and Logging Configuration for the pkl-vscode Installer

Sets up the detailed file log and the terse console stream, and installs
a global exception hook so unexpected failures are always logged.
"""

import sys
import os
import logging
from pathlib import Path
from typing import Optional


DEFAULT_LOG_DIR = Path.home() / 'pkl-vscode-installer'
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / 'pkl_vscode_installer.log'


class ErrorHandler:
    """
    Centralized error handling and logging system.
    """

    def __init__(self, log_file: Optional[Path] = None, verbose: bool = False):
        """
        Initialize the error handler.

        Args:
            log_file: Optional path to log file
            verbose: Whether the console should show DEBUG messages
        """
        self.log_file = Path(log_file) if log_file is not None else DEFAULT_LOG_FILE
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)
        self.setup_logging()

    def setup_logging(self):
        """Set up logging configuration."""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        # Clear any existing handlers
        root_logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if self.verbose else logging.INFO)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        root_logger.addHandler(console_handler)

        # File handler for detailed logging; the console keeps working without it
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        except OSError as e:
            self.logger.warning(f"Could not open log file {self.log_file}: {e}")
            return

        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)
        self.logger.debug(f"Log file: {self.log_file}")

    def handle_exception(self, exc_type, exc_value, exc_traceback):
        """
        Handle uncaught exceptions.

        Args:
            exc_type: Exception type
            exc_value: Exception value
            exc_traceback: Exception traceback
        """
        if issubclass(exc_type, KeyboardInterrupt):
            # Handle Ctrl+C gracefully
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        self.logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )
        self.logger.critical(f"Please check the log file for details: {self.log_file}")


def setup_global_error_handling(log_file: Optional[Path] = None,
                                verbose: bool = False) -> ErrorHandler:
    """
    Set up global error handling for the application.

    Args:
        log_file: Optional path to log file
        verbose: Whether to show DEBUG output on the console

    Returns:
        ErrorHandler instance
    """
    error_handler = ErrorHandler(log_file=log_file, verbose=verbose)
    sys.excepthook = error_handler.handle_exception

    logger = logging.getLogger(__name__)
    logger.debug("=" * 50)
    logger.debug("pkl-vscode installer starting")
    logger.debug(f"Python version: {sys.version}")
    logger.debug(f"Platform: {sys.platform}")
    logger.debug(f"Working directory: {os.getcwd()}")
    logger.debug("=" * 50)

    return error_handler
