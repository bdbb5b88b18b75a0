"""
File Downloader for the pkl-vscode Installer

Provides a reusable file download system with:
- Progress tracking and callbacks
- Optional retries (a single attempt by default)
- Cleanup of partial downloads
- File integrity verification
"""

import os
import requests
import hashlib
from pathlib import Path
from typing import Optional, Callable
from dataclasses import dataclass
import logging
import time
from urllib.parse import urlparse


@dataclass
class DownloadResult:
    """
    Container for download operation results.

    Attributes:
        success: Whether the download completed successfully
        file_path: Path to the downloaded file
        file_size: Size of the downloaded file in bytes
        download_time: Time taken for download in seconds
        error_message: Error description if download failed
        http_status: HTTP status code from the request
    """
    success: bool
    file_path: Optional[Path] = None
    file_size: int = 0
    download_time: float = 0.0
    error_message: Optional[str] = None
    http_status: Optional[int] = None


@dataclass
class DownloadProgress:
    """
    Container for download progress information.

    Attributes:
        downloaded_bytes: Number of bytes downloaded so far
        total_bytes: Total file size in bytes (0 if unknown)
        percentage: Download completion percentage (0-100)
        speed_bps: Current download speed in bytes per second
    """
    downloaded_bytes: int
    total_bytes: int
    percentage: float
    speed_bps: float


class FileDownloader:
    """
    A file downloader with progress tracking and error handling.

    Each attempt writes the target file from scratch, so a retry never
    appends to bytes left behind by a failed attempt.
    """

    def __init__(self,
                 chunk_size: int = 8192,
                 timeout: int = 30,
                 max_retries: int = 1,
                 retry_delay: float = 1.0,
                 session: Optional[requests.Session] = None):
        """
        Initialize the file downloader.

        Args:
            chunk_size: Size of chunks to download at a time (bytes)
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts (1 means no retry)
            retry_delay: Delay between attempts in seconds
            session: Optional pre-configured requests session
        """
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.logger = logging.getLogger(__name__)

        # Session for connection pooling and header persistence
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'pkl-vscode-installer/1.0'
        })

    def download_file(self,
                     url: str,
                     target_path: Path,
                     filename: Optional[str] = None,
                     progress_callback: Optional[Callable[[DownloadProgress], None]] = None) -> DownloadResult:
        """
        Download a file from URL to target location.

        Args:
            url: URL to download from
            target_path: Directory path where file will be saved
            filename: Specific filename to use (if None, extracted from URL)
            progress_callback: Function to call with progress updates

        Returns:
            DownloadResult: Details about the download operation
        """
        start_time = time.time()

        try:
            target_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error_msg = f"Download setup failed: {e}"
            self.logger.error(error_msg)
            return DownloadResult(success=False, error_message=error_msg)

        if filename is None:
            filename = self._extract_filename_from_url(url)

        file_path = target_path / filename
        self.logger.info(f"Starting download from {url} to {file_path}")

        result = DownloadResult(success=False, file_path=file_path)
        for attempt in range(1, self.max_retries + 1):
            result = self._attempt_download(url, file_path, progress_callback)
            result.download_time = time.time() - start_time

            if result.success:
                self.logger.info(
                    f"Download completed in {result.download_time:.2f}s "
                    f"({result.file_size} bytes)"
                )
                return result

            if attempt < self.max_retries:
                self.logger.warning(
                    f"Download attempt {attempt} failed: {result.error_message}. "
                    f"Retrying in {self.retry_delay}s..."
                )
                time.sleep(self.retry_delay)

        self.logger.error(f"Download failed: {result.error_message}")
        self.cleanup_partial_download(file_path)
        return result

    def _attempt_download(self,
                         url: str,
                         file_path: Path,
                         progress_callback: Optional[Callable[[DownloadProgress], None]]) -> DownloadResult:
        """
        Attempt a single download operation.

        Args:
            url: URL to download from
            file_path: Path where file will be saved
            progress_callback: Progress callback function

        Returns:
            DownloadResult: Result of the download attempt
        """
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                return self._write_response(response, file_path, progress_callback)

        except requests.exceptions.Timeout:
            return DownloadResult(
                success=False,
                file_path=file_path,
                error_message="Download timed out"
            )
        except requests.exceptions.ConnectionError:
            return DownloadResult(
                success=False,
                file_path=file_path,
                error_message="Connection error"
            )
        except requests.exceptions.RequestException as e:
            return DownloadResult(
                success=False,
                file_path=file_path,
                error_message=f"Request error: {str(e)}"
            )
        except OSError as e:
            return DownloadResult(
                success=False,
                file_path=file_path,
                error_message=f"File system error: {str(e)}"
            )
        except BaseException:
            # Interrupted mid-stream: never leave a truncated file behind
            self.cleanup_partial_download(file_path)
            raise

    def _write_response(self,
                        response: requests.Response,
                        file_path: Path,
                        progress_callback: Optional[Callable[[DownloadProgress], None]]) -> DownloadResult:
        """
        Stream a response body to disk.

        Args:
            response: Open streamed response
            file_path: Path where file will be saved
            progress_callback: Progress callback function

        Returns:
            DownloadResult: Result of writing the body
        """
        if response.status_code != 200:
            return DownloadResult(
                success=False,
                file_path=file_path,
                http_status=response.status_code,
                error_message=f"HTTP {response.status_code}: {response.reason}"
            )

        # Content-Length counts encoded bytes; iter_content yields decoded ones
        content_encoding = response.headers.get('content-encoding', 'identity').strip().lower()
        content_length = response.headers.get('content-length')
        if content_length and content_encoding == 'identity':
            total_size = int(content_length)
        else:
            total_size = 0
        self.logger.debug(f"Total file size: {total_size} bytes")

        downloaded_size = 0
        last_progress_time = time.time()
        last_downloaded_size = 0

        with open(file_path, 'wb') as f:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if not chunk:  # keep-alive
                    continue
                f.write(chunk)
                downloaded_size += len(chunk)

                if progress_callback:
                    current_time = time.time()
                    time_diff = current_time - last_progress_time

                    # Throttle updates to every 0.1 seconds
                    if time_diff >= 0.1:
                        speed_bps = (downloaded_size - last_downloaded_size) / time_diff
                        percentage = (downloaded_size / total_size) * 100 if total_size > 0 else 0.0
                        progress_callback(DownloadProgress(
                            downloaded_bytes=downloaded_size,
                            total_bytes=total_size,
                            percentage=percentage,
                            speed_bps=speed_bps
                        ))
                        last_progress_time = current_time
                        last_downloaded_size = downloaded_size

        if total_size and downloaded_size != total_size:
            return DownloadResult(
                success=False,
                file_path=file_path,
                file_size=downloaded_size,
                http_status=response.status_code,
                error_message=f"Incomplete download: {downloaded_size} of {total_size} bytes"
            )

        if progress_callback:
            progress_callback(DownloadProgress(
                downloaded_bytes=downloaded_size,
                total_bytes=total_size,
                percentage=100.0,
                speed_bps=0.0
            ))

        return DownloadResult(
            success=True,
            file_path=file_path,
            file_size=downloaded_size,
            http_status=response.status_code
        )

    def _extract_filename_from_url(self, url: str) -> str:
        """
        Extract filename from URL.

        Args:
            url: URL to extract filename from

        Returns:
            str: Extracted filename
        """
        parsed_url = urlparse(url)
        filename = os.path.basename(parsed_url.path)

        if not filename or '.' not in filename:
            filename = f"download_{int(time.time())}.bin"

        return filename

    def verify_file_integrity(self, file_path: Path, expected_hash: str,
                            hash_algorithm: str = 'sha256') -> bool:
        """
        Verify file integrity using hash comparison.

        Args:
            file_path: Path to file to verify
            expected_hash: Expected hash value
            hash_algorithm: Hash algorithm to use (md5, sha1, sha256, etc.)

        Returns:
            bool: True if file integrity is verified
        """
        if not file_path.exists():
            self.logger.error(f"Cannot verify missing file: {file_path}")
            return False

        try:
            hasher = hashlib.new(hash_algorithm)
            with open(file_path, 'rb') as f:
                for chunk in iter(lambda: f.read(self.chunk_size), b""):
                    hasher.update(chunk)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error verifying file integrity: {e}")
            return False

        calculated_hash = hasher.hexdigest().lower()
        expected_hash = expected_hash.lower()

        if calculated_hash == expected_hash:
            self.logger.info(f"File integrity verified: {file_path}")
            return True

        self.logger.error(
            f"File integrity check failed for {file_path}. "
            f"Expected: {expected_hash}, Got: {calculated_hash}"
        )
        return False

    def cleanup_partial_download(self, file_path: Path) -> bool:
        """
        Clean up a partial download file.

        Args:
            file_path: Path to the partial file to clean up

        Returns:
            bool: True if cleanup was successful
        """
        try:
            if file_path.exists():
                file_path.unlink()
                self.logger.info(f"Cleaned up partial download: {file_path}")
            return True
        except OSError as e:
            self.logger.error(f"Failed to cleanup partial download {file_path}: {e}")
            return False

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
