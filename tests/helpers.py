"""Fake HTTP sessions and command runners shared by the tests."""

from __future__ import annotations

import json
from typing import Any

import requests

from pkl_installer.utils.commands import CommandResult


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", content: bytes = b"",
                 headers: dict | None = None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.text = text
        self.content = content
        self.headers = headers or {}
        self.reason = reason
        self.closed = False

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} {self.reason}")

    def iter_content(self, chunk_size: int = 8192):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]


class FakeSession:
    """Maps URLs to canned responses (or exceptions) and records calls."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.routes = routes or {}
        self.calls: list[str] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404, reason="Not Found")
        if isinstance(route, Exception):
            raise route
        return route

    def close(self) -> None:
        self.closed = True


class FakeRunner:
    """Command runner that records argument vectors and returns scripted results."""

    def __init__(self, results: dict[str, CommandResult] | None = None) -> None:
        self.results = results or {}
        self.calls: list[list[str]] = []

    def __call__(self, args, capture: bool = True) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        for flag, result in self.results.items():
            if flag in args:
                return result
        return CommandResult(args=args, returncode=0)


def release_payload(tag: str = "0.31.0", assets: list[dict] | None = None) -> str:
    return json.dumps({
        "tag_name": tag,
        "name": tag,
        "published_at": "2025-01-01T00:00:00Z",
        "prerelease": False,
        "html_url": f"https://github.com/apple/pkl-vscode/releases/tag/{tag}",
        "body": "",
        "assets": assets or [],
    }, indent=2)


