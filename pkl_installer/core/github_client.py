"""
GitHub API Client for Editor Extension Releases

Handles interaction with GitHub's REST API to:
- Fetch the latest release of the extension repository
- Pull the version tag out of the release payload
- Build download URLs for release assets
- Cache release information to minimize API calls
"""

import json
import logging
import re
import time
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

import requests


# Matches the "tag_name" field of a release payload, e.g. "tag_name": "0.31.0"
TAG_NAME_PATTERN = re.compile(r'"tag_name":\s*"([^"]+)"')


@dataclass
class ReleaseAsset:
    """
    Information about a release asset (downloadable file).

    Attributes:
        name: Asset filename
        download_url: Direct download URL
        size: File size in bytes
        content_type: MIME type of the file
        digest: Checksum published by GitHub, e.g. "sha256:<hex>" (may be missing)
    """
    name: str
    download_url: str
    size: int
    content_type: str = 'unknown'
    digest: Optional[str] = None

    def sha256(self) -> Optional[str]:
        """Return the hex SHA-256 from the digest, if GitHub published one."""
        if self.digest and self.digest.lower().startswith('sha256:'):
            return self.digest.split(':', 1)[1]
        return None


@dataclass
class Release:
    """
    Information about a GitHub release.

    Attributes:
        tag_name: Git tag name (version)
        name: Release name/title
        published_at: Publication timestamp
        prerelease: Whether this is a pre-release
        assets: List of downloadable assets
        body: Release description/notes
        html_url: Release page URL
    """
    tag_name: str
    name: str = ''
    published_at: str = ''
    prerelease: bool = False
    assets: List[ReleaseAsset] = field(default_factory=list)
    body: str = ''
    html_url: str = ''


def extract_tag_name(payload: str) -> Optional[str]:
    """
    Extract the version tag from a raw release payload.

    Args:
        payload: JSON text returned by the releases endpoint

    Returns:
        str: The first "tag_name" value, or None if absent or empty
    """
    if not payload:
        return None
    match = TAG_NAME_PATTERN.search(payload)
    if not match:
        return None
    return match.group(1).strip() or None


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare two version strings, ignoring a leading 'v'.

    Returns:
        int: 1 if version1 > version2, -1 if version1 < version2, 0 if equal
    """
    v1 = version1.strip().lstrip('vV')
    v2 = version2.strip().lstrip('vV')
    try:
        parts1 = [int(x) for x in v1.split('.')]
        parts2 = [int(x) for x in v2.split('.')]
    except ValueError:
        # Non-numeric component, fall back to string comparison
        return (v1 > v2) - (v1 < v2)

    max_len = max(len(parts1), len(parts2))
    parts1.extend([0] * (max_len - len(parts1)))
    parts2.extend([0] * (max_len - len(parts2)))

    for p1, p2 in zip(parts1, parts2):
        if p1 > p2:
            return 1
        elif p1 < p2:
            return -1
    return 0


class GitHubAPIClient:
    """
    Client for interacting with GitHub's REST API to get extension releases.

    Features:
    - Rate limit tracking
    - Response caching to minimize API calls
    - Optional token authentication
    """

    def __init__(self,
                 repo_owner: str = 'apple',
                 repo_name: str = 'pkl-vscode',
                 github_token: Optional[str] = None,
                 cache_duration: int = 300,
                 session: Optional[requests.Session] = None):
        """
        Initialize the GitHub API client.

        Args:
            repo_owner: Owner of the extension repository
            repo_name: Name of the extension repository
            github_token: Optional GitHub Personal Access Token for authenticated requests
            cache_duration: How long to cache responses in seconds (default: 5 minutes)
            session: Optional pre-configured requests session
        """
        self.logger = logging.getLogger(__name__)
        self.base_url = "https://api.github.com"
        self.download_base_url = "https://github.com"
        self.repo_owner = repo_owner
        self.repo_name = repo_name
        self.cache_duration = cache_duration
        self.github_token = None

        self._cache: Dict[str, Dict[str, Any]] = {}

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'pkl-vscode-installer/1.0'
        })

        self.rate_limit_remaining = 60
        self.rate_limit_reset = time.time() + 3600
        self.set_github_token(github_token)

    @property
    def repo_path(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    def set_github_token(self, token: Optional[str]) -> None:
        """
        Set or remove the GitHub Personal Access Token.

        Args:
            token: GitHub Personal Access Token, or None to remove authentication
        """
        if token and token.strip():
            self.github_token = token.strip()
            self.session.headers['Authorization'] = f'token {self.github_token}'
            # Authenticated requests have higher rate limits (5000/hour vs 60/hour)
            self.rate_limit_remaining = 5000
            self.logger.debug("GitHub API client using authentication token")
        else:
            self.github_token = None
            self.session.headers.pop('Authorization', None)
            self.rate_limit_remaining = 60
            self.logger.debug("GitHub API client unauthenticated (rate limited)")

    def get_latest_release_payload(self) -> Optional[str]:
        """
        Fetch the raw latest-release payload.

        Returns:
            str: Response body text, or None on error
        """
        cache_key = "latest_release_payload"
        if self._is_cache_valid(cache_key):
            self.logger.debug("Using cached release payload")
            return self._cache[cache_key]['data']

        endpoint = f"/repos/{self.repo_path}/releases/latest"
        response = self._make_api_request(endpoint)
        if response is None:
            return None

        payload = response.text
        self._cache[cache_key] = {'data': payload, 'timestamp': time.time()}
        return payload

    def get_latest_version(self) -> Optional[str]:
        """
        Get the tag of the latest release.

        Returns:
            str: Version tag, or None if it could not be determined
        """
        self.logger.info(f"Fetching latest release information for {self.repo_path}")
        payload = self.get_latest_release_payload()
        if payload is None:
            return None

        version = extract_tag_name(payload)
        if version is None:
            self.logger.error(f"No tag_name found in latest release payload for {self.repo_path}")
        return version

    def get_latest_release(self) -> Optional[Release]:
        """
        Get the latest release with its assets.

        Returns:
            Release: Latest release information, or None if error
        """
        payload = self.get_latest_release_payload()
        if payload is None:
            return None
        return self._parse_release_payload(payload)

    def get_release_by_tag(self, tag: str) -> Optional[Release]:
        """
        Get a specific release by its tag.

        Args:
            tag: Release tag to look up

        Returns:
            Release: Release information, or None if error
        """
        cache_key = f"release_tag_{tag}"
        if self._is_cache_valid(cache_key):
            return self._parse_release_payload(self._cache[cache_key]['data'])

        self.logger.info(f"Fetching release {tag} for {self.repo_path}")
        response = self._make_api_request(f"/repos/{self.repo_path}/releases/tags/{tag}")
        if response is None:
            return None

        self._cache[cache_key] = {'data': response.text, 'timestamp': time.time()}
        return self._parse_release_payload(response.text)

    def build_download_url(self, version: str, asset_name: str) -> str:
        """
        Build the public download URL of a release asset.

        Args:
            version: Release tag
            asset_name: Asset filename

        Returns:
            str: Download URL
        """
        return f"{self.download_base_url}/{self.repo_path}/releases/download/{version}/{asset_name}"

    def find_asset(self, release: Release, asset_name: str) -> Optional[ReleaseAsset]:
        """
        Find an asset in a release by filename.

        Args:
            release: Release to search
            asset_name: Exact asset filename

        Returns:
            ReleaseAsset: Matching asset, or None if not found
        """
        for asset in release.assets:
            if asset.name == asset_name:
                return asset
        self.logger.debug(f"Asset {asset_name} not listed in release {release.tag_name}")
        return None

    def _make_api_request(self, endpoint: str, params: Optional[Dict] = None) -> Optional[requests.Response]:
        """
        Make a request to the GitHub API with rate limiting and error handling.

        Args:
            endpoint: API endpoint to request
            params: Query parameters

        Returns:
            Successful response, or None if error
        """
        url = f"{self.base_url}{endpoint}"

        try:
            if self.rate_limit_remaining <= 1 and time.time() < self.rate_limit_reset:
                wait_time = self.rate_limit_reset - time.time()
                self.logger.warning(f"Rate limit reached, waiting {wait_time:.1f}s")
                time.sleep(wait_time)

            response = self.session.get(url, params=params, timeout=30)

            if 'X-RateLimit-Remaining' in response.headers:
                self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])
            if 'X-RateLimit-Reset' in response.headers:
                self.rate_limit_reset = int(response.headers['X-RateLimit-Reset'])

            response.raise_for_status()
            return response

        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed for {url}: {e}")
            return None

    def _parse_release_payload(self, payload: str) -> Optional[Release]:
        """
        Parse release data from a GitHub API response body.

        Args:
            payload: Raw JSON text

        Returns:
            Release: Parsed release object, or None if the payload is malformed
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            self.logger.error(f"Failed to parse release JSON: {e}")
            return None

        if not isinstance(data, dict) or not data.get('tag_name'):
            self.logger.error("Release payload has no tag_name")
            return None

        assets = []
        for asset_data in data.get('assets') or []:
            try:
                assets.append(ReleaseAsset(
                    name=asset_data['name'],
                    download_url=asset_data['browser_download_url'],
                    size=int(asset_data.get('size', 0)),
                    content_type=asset_data.get('content_type') or 'unknown',
                    digest=asset_data.get('digest')
                ))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping malformed asset entry: {e}")

        return Release(
            tag_name=data['tag_name'],
            name=data.get('name') or '',
            published_at=data.get('published_at') or '',
            prerelease=bool(data.get('prerelease', False)),
            assets=assets,
            body=data.get('body') or '',
            html_url=data.get('html_url') or ''
        )

    def _is_cache_valid(self, cache_key: str) -> bool:
        if cache_key not in self._cache:
            return False
        cache_age = time.time() - self._cache[cache_key]['timestamp']
        return cache_age < self.cache_duration

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
