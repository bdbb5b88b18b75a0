from __future__ import annotations

import requests

from pkl_installer.core.github_client import (
    GitHubAPIClient,
    compare_versions,
    extract_tag_name,
)

from helpers import FakeResponse, FakeSession, release_payload

LATEST_URL = "https://api.github.com/repos/apple/pkl-vscode/releases/latest"


def test_extract_tag_name_from_pretty_json() -> None:
    assert extract_tag_name(release_payload("0.31.0")) == "0.31.0"


def test_extract_tag_name_from_compact_json() -> None:
    assert extract_tag_name('{"url":"x","tag_name":"v1.2.3","name":"n"}') == "v1.2.3"


def test_extract_tag_name_missing_or_empty() -> None:
    assert extract_tag_name("") is None
    assert extract_tag_name('{"message": "Not Found"}') is None
    assert extract_tag_name('{"tag_name": ""}') is None


def test_compare_versions() -> None:
    assert compare_versions("0.31.0", "0.30.2") == 1
    assert compare_versions("v1.0", "1.0.0") == 0
    assert compare_versions("0.9.0", "0.10.0") == -1


def test_get_latest_version_uses_latest_endpoint() -> None:
    session = FakeSession({LATEST_URL: FakeResponse(text=release_payload("0.31.0"))})
    client = GitHubAPIClient(session=session)

    assert client.get_latest_version() == "0.31.0"
    assert session.calls == [LATEST_URL]


def test_latest_payload_is_cached() -> None:
    session = FakeSession({LATEST_URL: FakeResponse(text=release_payload("0.31.0"))})
    client = GitHubAPIClient(session=session)

    client.get_latest_version()
    client.get_latest_release()

    assert session.calls == [LATEST_URL]


def test_get_latest_version_http_error_returns_none() -> None:
    session = FakeSession({LATEST_URL: FakeResponse(status_code=403, reason="Forbidden")})
    client = GitHubAPIClient(session=session)

    assert client.get_latest_version() is None


def test_get_latest_version_network_error_returns_none() -> None:
    session = FakeSession({LATEST_URL: requests.exceptions.ConnectionError("down")})
    client = GitHubAPIClient(session=session)

    assert client.get_latest_version() is None


def test_rate_limit_headers_are_tracked() -> None:
    headers = {"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"}
    session = FakeSession({LATEST_URL: FakeResponse(text=release_payload(), headers=headers)})
    client = GitHubAPIClient(session=session)

    client.get_latest_version()

    assert client.rate_limit_remaining == 42
    assert client.rate_limit_reset == 1700000000


def test_token_sets_and_clears_authorization_header() -> None:
    session = FakeSession()
    client = GitHubAPIClient(github_token="ghp_abc", session=session)
    assert session.headers["Authorization"] == "token ghp_abc"

    client.set_github_token(None)
    assert "Authorization" not in session.headers


def test_build_download_url() -> None:
    client = GitHubAPIClient(session=FakeSession())

    url = client.build_download_url("0.31.0", "pkl-vscode-0.31.0.vsix")

    assert url == (
        "https://github.com/apple/pkl-vscode/releases/download/0.31.0/pkl-vscode-0.31.0.vsix"
    )


def test_release_assets_and_digest_are_parsed() -> None:
    assets = [
        {
            "name": "pkl-vscode-0.31.0.vsix",
            "browser_download_url": "https://example.invalid/pkl-vscode-0.31.0.vsix",
            "size": 123,
            "content_type": "application/octet-stream",
            "digest": "sha256:ABCDEF",
        },
        {"name": "broken"},
    ]
    session = FakeSession({LATEST_URL: FakeResponse(text=release_payload("0.31.0", assets))})
    client = GitHubAPIClient(session=session)

    release = client.get_latest_release()

    assert release is not None
    assert release.tag_name == "0.31.0"
    assert [a.name for a in release.assets] == ["pkl-vscode-0.31.0.vsix"]
    asset = client.find_asset(release, "pkl-vscode-0.31.0.vsix")
    assert asset is not None and asset.sha256() == "ABCDEF"
    assert client.find_asset(release, "other.vsix") is None


def test_get_release_by_tag() -> None:
    url = "https://api.github.com/repos/apple/pkl-vscode/releases/tags/0.30.0"
    session = FakeSession({url: FakeResponse(text=release_payload("0.30.0"))})
    client = GitHubAPIClient(session=session)

    release = client.get_release_by_tag("0.30.0")

    assert release is not None and release.tag_name == "0.30.0"
