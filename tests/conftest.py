"""Shared fixtures: an in-memory GitHub answering through ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from github_workspace.infrastructure.github_rest_adapter import GitHubRestAdapter


class FakeGitHub:
    """Route table keyed by (method, path); records every request it sees.

    Queued responses for a route are served in order; the last one repeats.
    Unknown routes answer 404 like GitHub does.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[httpx.Response]] = {}

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> None:
        if text is not None:
            response = httpx.Response(status_code, text=text)
        else:
            response = httpx.Response(status_code, json=json)
        self._routes.setdefault((method, path), []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
async def http_client(github: FakeGitHub):
    async with httpx.AsyncClient(transport=httpx.MockTransport(github.handler)) as client:
        yield client


@pytest.fixture
def adapter(http_client: httpx.AsyncClient) -> GitHubRestAdapter:
    return GitHubRestAdapter(http_client, token="test-token")


# ── Payload builders ────────────────────────────────────────────────────────


def user_payload(login: str = "octocat") -> dict[str, Any]:
    return {
        "login": login,
        "id": 1,
        "name": "The Octocat",
        "email": "octocat@github.com",
        "avatar_url": "https://avatars.githubusercontent.com/u/1",
        "html_url": f"https://github.com/{login}",
        "public_repos": 8,
    }


def repo_payload(name: str = "hello-world", owner: str = "octocat") -> dict[str, Any]:
    return {
        "id": 1296269,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "description": "My first repo",
        "private": False,
        "default_branch": "main",
        "html_url": f"https://github.com/{owner}/{name}",
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "updated_at": "2024-01-26T19:14:43Z",
    }


def content_write_payload(path: str, blob_sha: str = "blob1", commit_sha: str = "c1") -> dict[str, Any]:
    return {
        "content": {"name": path.rsplit("/", 1)[-1], "path": path, "sha": blob_sha},
        "commit": {"sha": commit_sha, "message": "msg"},
    }
