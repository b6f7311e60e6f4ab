"""HTTP facade: routing, request validation and error translation."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeGitHub, content_write_payload, repo_payload, user_payload
from github_workspace.infrastructure.config import get_settings
from github_workspace.infrastructure.github_rest_adapter import GitHubRestAdapter
from github_workspace.interface.app import create_app
from github_workspace.interface.dependencies import get_repo_host


@pytest.fixture
def client(github: FakeGitHub):
    app = create_app()
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(github.handler))
    app.dependency_overrides[get_repo_host] = lambda: GitHubRestAdapter(
        http_client, token="test-token"
    )
    yield TestClient(app)
    asyncio.run(http_client.aclose())


@pytest.fixture
def no_configured_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_get_user(client, github: FakeGitHub):
    github.add("GET", "/user", json=user_payload())

    resp = client.get("/user")

    assert resp.status_code == 200
    assert resp.json()["login"] == "octocat"


def test_missing_token_is_401(no_configured_token):
    with TestClient(create_app()) as client:
        resp = client.get("/user")

    assert resp.status_code == 401
    assert resp.json()["status"] == "error"
    assert "GITHUB_TOKEN" in resp.json()["message"]


def test_upstream_client_error_passes_through(client):
    resp = client.get("/repos/o/r/branches")

    assert resp.status_code == 404
    body = resp.json()
    assert body["status"] == "error"
    assert body["message"].startswith("GitHub API error: 404 Not Found")


def test_upstream_server_error_is_502(client, github: FakeGitHub):
    github.add("GET", "/user/repos", status_code=503, text="unavailable")

    resp = client.get("/repos")

    assert resp.status_code == 502
    assert "503" in resp.json()["message"]


def test_create_repository(client, github: FakeGitHub):
    github.add("POST", "/user/repos", status_code=201, json=repo_payload("fresh"))

    resp = client.post("/repos", json={"name": "fresh", "private": True})

    assert resp.status_code == 201
    assert resp.json()["full_name"] == "octocat/fresh"
    assert FakeGitHub.body(github.requests[0])["private"] is True


def test_blank_repository_name_is_rejected(client, github: FakeGitHub):
    resp = client.post("/repos", json={"name": "   "})

    assert resp.status_code == 422
    assert "name must not be empty" in resp.json()["message"]
    assert github.requests == []


def test_repository_exists(client, github: FakeGitHub):
    github.add("GET", "/user", json=user_payload())
    github.add("GET", "/repos/octocat/hello-world", json=repo_payload())

    assert client.get("/repos/hello-world/exists").json() == {"exists": True}
    assert client.get("/repos/nope/exists").json() == {"exists": False}


def test_read_file(client, github: FakeGitHub):
    github.add("GET", "/repos/o/r/contents/src/app.py", json={"content": "cHJpbnQoMSkK", "sha": "s"})

    resp = client.get("/repos/o/r/file", params={"path": "src/app.py", "branch": "dev"})

    assert resp.status_code == 200
    assert resp.json() == {"path": "src/app.py", "branch": "dev", "content": "print(1)\n"}
    assert github.requests[0].url.params["ref"] == "dev"


def test_write_file_creates_when_missing(client, github: FakeGitHub):
    github.add("PUT", "/repos/o/r/contents/new.md", status_code=201, json=content_write_payload("new.md"))

    resp = client.put(
        "/repos/o/r/file",
        json={"path": "new.md", "content": "# New", "message": "Add new.md"},
    )

    assert resp.status_code == 200
    assert resp.json()["path"] == "new.md"
    (put,) = github.sent("PUT", "/repos/o/r/contents/new.md")
    assert "sha" not in FakeGitHub.body(put)


def test_delete_file(client, github: FakeGitHub):
    github.add("DELETE", "/repos/o/r/contents/old.md", json={"content": None, "commit": {"sha": "c2"}})

    resp = client.request(
        "DELETE",
        "/repos/o/r/file",
        json={"path": "old.md", "message": "Remove", "sha": "s1"},
    )

    assert resp.status_code == 200
    assert resp.json()["sha"] is None
    assert resp.json()["commit_sha"] == "c2"


def test_upload_names_default_to_basename(client, github: FakeGitHub):
    github.add("PUT", "/repos/o/r/contents/docs/README.md", status_code=201,
               json=content_write_payload("docs/README.md"))

    resp = client.post(
        "/repos/o/r/upload",
        json={"files": [{"path": "docs/README.md", "content": "hi"}]},
    )

    assert resp.status_code == 200
    assert [c["path"] for c in resp.json()] == ["docs/README.md"]
    assert FakeGitHub.body(github.requests[0])["message"] == "Add README.md"


def test_upload_requires_files(client):
    resp = client.post("/repos/o/r/upload", json={"files": []})

    assert resp.status_code == 422


def test_tree(client, github: FakeGitHub):
    github.add("GET", "/repos/o/r/branches/main", json={"name": "main", "commit": {"sha": "h"}})
    github.add("GET", "/repos/o/r/git/trees/h", json={"sha": "h", "tree": [{"path": "a", "type": "blob", "sha": "x"}]})

    resp = client.get("/repos/o/r/tree", params={"recursive": "true"})

    assert resp.status_code == 200
    assert resp.json()["entries"][0]["path"] == "a"
    assert github.requests[1].url.params["recursive"] == "1"


def test_list_repositories(client, github: FakeGitHub):
    github.add("GET", "/user/repos", json=[repo_payload("a"), repo_payload("b")])

    resp = client.get("/repos")

    assert resp.status_code == 200
    assert [r["name"] for r in resp.json()] == ["a", "b"]
    assert github.requests[0].url.params["sort"] == "updated"
    assert github.requests[0].url.params["per_page"] == "100"


def test_get_repository(client, github: FakeGitHub):
    github.add("GET", "/user", json=user_payload("mona"))
    github.add("GET", "/repos/mona/notes", json=repo_payload("notes", owner="mona"))

    resp = client.get("/repos/notes")

    assert resp.status_code == 200
    assert resp.json()["full_name"] == "mona/notes"
    assert resp.json()["owner"] == "mona"


def test_list_branches(client, github: FakeGitHub):
    github.add(
        "GET",
        "/repos/o/r/branches",
        json=[{"name": "main", "commit": {"sha": "aaa"}, "protected": True}],
    )

    resp = client.get("/repos/o/r/branches")

    assert resp.status_code == 200
    assert resp.json() == [{"name": "main", "commit_sha": "aaa", "protected": True}]


def test_create_branch(client, github: FakeGitHub):
    github.add(
        "POST",
        "/repos/o/r/git/refs",
        status_code=201,
        json={"ref": "refs/heads/feature", "object": {"sha": "abc"}},
    )

    resp = client.post("/repos/o/r/branches", json={"name": "feature", "from_sha": "abc"})

    assert resp.status_code == 201
    assert resp.json() == {"ref": "refs/heads/feature", "sha": "abc"}
    assert FakeGitHub.body(github.requests[0]) == {"ref": "refs/heads/feature", "sha": "abc"}


def test_list_contents(client, github: FakeGitHub):
    github.add(
        "GET",
        "/repos/o/r/contents/src",
        json=[{"name": "app.py", "path": "src/app.py", "type": "file", "size": 3, "sha": "s1",
               "download_url": None}],
    )

    resp = client.get("/repos/o/r/contents", params={"path": "src", "branch": "dev"})

    assert resp.status_code == 200
    assert resp.json()[0]["path"] == "src/app.py"
    assert github.requests[0].url.params["ref"] == "dev"


def test_list_commits(client, github: FakeGitHub):
    github.add(
        "GET",
        "/repos/o/r/commits",
        json=[{"sha": "c1", "commit": {"message": "Initial", "author": {"name": "Mona"}}}],
    )

    resp = client.get("/repos/o/r/commits", params={"branch": "dev"})

    assert resp.status_code == 200
    assert resp.json()[0]["sha"] == "c1"
    assert resp.json()[0]["author_name"] == "Mona"
    params = github.requests[0].url.params
    assert params["sha"] == "dev"
    assert params["per_page"] == "10"


def test_read_directory_as_file_is_502(client, github: FakeGitHub):
    github.add("GET", "/repos/o/r/contents/src", json=[{"name": "a", "path": "src/a", "sha": "s"}])

    resp = client.get("/repos/o/r/file", params={"path": "src"})

    assert resp.status_code == 502
    assert resp.json() == {"status": "error", "message": "o/r/src is a directory, not a file"}


def test_error_envelope_is_documented(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/user"]["get"]["responses"]
    assert responses["404"]["content"]["application/json"]["schema"]["$ref"].endswith(
        "/ErrorResponse"
    )
