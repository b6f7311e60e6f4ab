"""GitHub REST API adapter — implements the RepoHost port."""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from github_workspace.domain.entities import (
    FileChange,
    GitHubBranch,
    GitHubCommit,
    GitHubFile,
    GitHubRepo,
    GitHubUser,
    GitRef,
    GitTree,
    TreeEntry,
    UploadFile,
)
from github_workspace.domain.exceptions import (
    ContentUnavailableError,
    GitHubApiError,
    GitHubTransportError,
    GitHubWorkspaceError,
)
from github_workspace.services.content_codec import decode_content, encode_content

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_USER_AGENT = "github-workspace/1.0"
_DEFAULT_BRANCH = "main"
_REPOS_PER_PAGE = 100
_COMMITS_PER_PAGE = 10


class GitHubRestAdapter:
    """Concrete RepoHost backed by the GitHub v3 REST API.

    The adapter does not own *client*; whoever created it closes it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        *,
        base_url: str = _GITHUB_API,
        user_agent: str = _USER_AGENT,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._api_headers: dict[str, str] = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }

    # ── Shared dispatch ─────────────────────────────────────────────────

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Perform a GitHub API request and return the decoded JSON body."""
        url = f"{self._base_url}{endpoint}"
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(
                method, url, headers=self._api_headers, params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise GitHubTransportError(
                f"Network error calling {method} {url}: {exc}"
            ) from exc

        _raise_for_status(resp)

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ── User & repositories ─────────────────────────────────────────────

    async def get_user(self) -> GitHubUser:
        """GET /user → GitHubUser."""
        data = await self.request("GET", "/user")
        return _to_user(data)

    async def get_repositories(self) -> list[GitHubRepo]:
        """GET /user/repos?sort=updated&per_page=100 → [GitHubRepo]."""
        data = await self.request(
            "GET",
            "/user/repos",
            params={"sort": "updated", "per_page": str(_REPOS_PER_PAGE)},
        )
        return [_to_repo(item) for item in data]

    async def get_repository(self, name: str) -> GitHubRepo:
        """GET /repos/{login}/{name} for the authenticated user."""
        user = await self.get_user()
        data = await self.request("GET", f"/repos/{user.login}/{name}")
        return _to_repo(data)

    async def check_repository_exists(self, name: str) -> bool:
        try:
            await self.get_repository(name)
        except GitHubWorkspaceError:
            logger.debug("Repository %s not reachable, treating as absent", name)
            return False
        return True

    async def create_repository(
        self, name: str, description: str, private: bool
    ) -> GitHubRepo:
        """POST /user/repos, initialised with a README so it has a branch."""
        data = await self.request(
            "POST",
            "/user/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "auto_init": True,
            },
        )
        return _to_repo(data)

    # ── Branches ────────────────────────────────────────────────────────

    async def get_branches(self, owner: str, repo: str) -> list[GitHubBranch]:
        data = await self.request("GET", f"/repos/{owner}/{repo}/branches")
        return [_to_branch(item) for item in data]

    async def get_branch(self, owner: str, repo: str, branch: str) -> GitHubBranch:
        data = await self.request("GET", f"/repos/{owner}/{repo}/branches/{branch}")
        return _to_branch(data)

    async def create_branch(
        self, owner: str, repo: str, new_branch: str, from_sha: str
    ) -> GitRef:
        """POST /repos/{owner}/{repo}/git/refs pointing refs/heads/{new_branch} at *from_sha*."""
        data = await self.request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{new_branch}", "sha": from_sha},
        )
        return GitRef(ref=data["ref"], sha=data.get("object", {}).get("sha", from_sha))

    # ── Contents (read) ─────────────────────────────────────────────────

    async def get_repo_contents(
        self,
        owner: str,
        repo: str,
        path: str = "",
        branch: str = _DEFAULT_BRANCH,
    ) -> list[GitHubFile]:
        """GET /repos/{owner}/{repo}/contents/{path}?ref={branch} → [GitHubFile].

        A directory yields its entries; a single file yields a one-item list.
        """
        data = await self._get_contents(owner, repo, path, branch)
        if isinstance(data, list):
            return [_to_file(item) for item in data]
        return [_to_file(data)]

    async def get_file_content(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str = _DEFAULT_BRANCH,
    ) -> str:
        """Return the decoded text of a file.

        Small files come inline as base64.  Larger ones only carry a
        ``download_url``, which is fetched without the API headers.
        """
        data = await self._get_contents(owner, repo, path, branch)
        if not isinstance(data, dict):
            raise ContentUnavailableError(
                f"{owner}/{repo}/{path} is a directory, not a file"
            )

        if data.get("content"):
            return decode_content(data["content"])

        download_url = data.get("download_url")
        if download_url:
            return await self._download(download_url)

        raise ContentUnavailableError(
            f"Unable to retrieve file content for {owner}/{repo}/{path}"
        )

    async def get_commits(
        self, owner: str, repo: str, branch: str = _DEFAULT_BRANCH
    ) -> list[GitHubCommit]:
        """GET /repos/{owner}/{repo}/commits?sha={branch}&per_page=10."""
        data = await self.request(
            "GET",
            f"/repos/{owner}/{repo}/commits",
            params={"sha": branch, "per_page": str(_COMMITS_PER_PAGE)},
        )
        return [_to_commit(item) for item in data]

    async def get_repository_tree(
        self,
        owner: str,
        repo: str,
        branch: str = _DEFAULT_BRANCH,
        recursive: bool = False,
    ) -> GitTree:
        """Resolve *branch* to its head commit, then GET its git tree."""
        head = await self.get_branch(owner, repo, branch)
        params = {"recursive": "1"} if recursive else None
        data = await self.request(
            "GET", f"/repos/{owner}/{repo}/git/trees/{head.commit_sha}", params=params
        )
        return GitTree(
            sha=data["sha"],
            truncated=data.get("truncated", False),
            entries=[
                TreeEntry(
                    path=item["path"],
                    type=item.get("type", "blob"),
                    sha=item.get("sha", ""),
                    size=item.get("size", 0),
                    mode=item.get("mode", ""),
                )
                for item in data.get("tree", [])
            ],
        )

    # ── Contents (write) ────────────────────────────────────────────────

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = _DEFAULT_BRANCH,
    ) -> FileChange:
        """PUT /repos/{owner}/{repo}/contents/{path} without a sha."""
        data = await self.request(
            "PUT",
            _contents_endpoint(owner, repo, path),
            json={
                "message": message,
                "content": encode_content(content),
                "branch": branch,
            },
        )
        return _to_change(path, data)

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str | None = None,
        branch: str = _DEFAULT_BRANCH,
    ) -> FileChange:
        """PUT a new version of *path*.

        Without *sha* the current blob sha is looked up first; if that
        lookup fails the file is assumed missing and created instead.
        """
        if not sha:
            try:
                sha = await self._current_sha(owner, repo, path, branch)
            except GitHubApiError as exc:
                logger.info(
                    "No current version of %s/%s/%s (%s), creating it",
                    owner, repo, path, exc.status_code,
                )
                return await self.create_file(owner, repo, path, content, message, branch)

        data = await self.request(
            "PUT",
            _contents_endpoint(owner, repo, path),
            json={
                "message": message,
                "content": encode_content(content),
                "branch": branch,
                "sha": sha,
            },
        )
        return _to_change(path, data)

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str = _DEFAULT_BRANCH,
    ) -> FileChange:
        data = await self.request(
            "DELETE",
            _contents_endpoint(owner, repo, path),
            json={"message": message, "sha": sha, "branch": branch},
        )
        return _to_change(path, data)

    async def upload_multiple_files(
        self,
        owner: str,
        repo: str,
        files: Sequence[UploadFile],
        branch: str = _DEFAULT_BRANCH,
    ) -> list[FileChange]:
        """Write *files* one at a time, creating each or updating it if it exists.

        The first file that can be neither created nor updated aborts the
        upload; files written before it stay written.
        """
        changes: list[FileChange] = []
        for file in files:
            try:
                change = await self.create_file(
                    owner, repo, file.path, file.content, f"Add {file.name}", branch
                )
            except GitHubApiError:
                logger.info("%s already exists, updating", file.path)
                try:
                    sha = await self._current_sha(owner, repo, file.path, branch)
                    change = await self.update_file(
                        owner,
                        repo,
                        file.path,
                        file.content,
                        f"Update {file.name}",
                        sha,
                        branch,
                    )
                except GitHubWorkspaceError:
                    logger.error("Failed to upload %s", file.name, exc_info=True)
                    raise
            changes.append(change)
        return changes

    # ── Helpers ─────────────────────────────────────────────────────────

    async def _get_contents(
        self, owner: str, repo: str, path: str, branch: str
    ) -> Any:
        return await self.request(
            "GET",
            _contents_endpoint(owner, repo, path),
            params={"ref": branch},
        )

    async def _download(self, url: str) -> str:
        try:
            resp = await self._client.get(url, headers={"User-Agent": self._user_agent})
        except httpx.HTTPError as exc:
            raise GitHubTransportError(f"Network error fetching {url}: {exc}") from exc
        _raise_for_status(resp)
        return resp.text

    async def _current_sha(self, owner: str, repo: str, path: str, branch: str) -> str:
        data = await self._get_contents(owner, repo, path, branch)
        if not isinstance(data, dict):
            raise ContentUnavailableError(
                f"{owner}/{repo}/{path} is a directory, not a file"
            )
        return data["sha"]


# ── Request helpers ─────────────────────────────────────────────────────────


def _contents_endpoint(owner: str, repo: str, path: str) -> str:
    # '#' and '?' are legal in file names
    return f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}"


def _raise_for_status(resp: httpx.Response) -> None:
    if not resp.is_success:
        raise GitHubApiError(resp.status_code, resp.reason_phrase, resp.text)


# ── Response mapping ────────────────────────────────────────────────────────


def _to_user(data: dict[str, Any]) -> GitHubUser:
    return GitHubUser(
        login=data["login"],
        id=data["id"],
        name=data.get("name"),
        email=data.get("email"),
        avatar_url=data.get("avatar_url"),
        html_url=data.get("html_url"),
        public_repos=data.get("public_repos", 0),
    )


def _to_repo(data: dict[str, Any]) -> GitHubRepo:
    return GitHubRepo(
        id=data["id"],
        name=data["name"],
        full_name=data["full_name"],
        owner=data.get("owner", {}).get("login", ""),
        description=data.get("description"),
        private=data.get("private", False),
        default_branch=data.get("default_branch", _DEFAULT_BRANCH),
        html_url=data.get("html_url"),
        clone_url=data.get("clone_url"),
        updated_at=data.get("updated_at"),
    )


def _to_branch(data: dict[str, Any]) -> GitHubBranch:
    return GitHubBranch(
        name=data["name"],
        commit_sha=data["commit"]["sha"],
        protected=data.get("protected", False),
    )


def _to_file(data: dict[str, Any]) -> GitHubFile:
    return GitHubFile(
        name=data["name"],
        path=data["path"],
        type=data.get("type", "file"),
        size=data.get("size", 0),
        sha=data.get("sha", ""),
        download_url=data.get("download_url"),
    )


def _to_commit(data: dict[str, Any]) -> GitHubCommit:
    commit = data.get("commit", {})
    author = commit.get("author") or {}
    return GitHubCommit(
        sha=data["sha"],
        message=commit.get("message", ""),
        author_name=author.get("name"),
        author_email=author.get("email"),
        date=author.get("date"),
        html_url=data.get("html_url"),
    )


def _to_change(path: str, data: dict[str, Any]) -> FileChange:
    content = data.get("content") or {}
    commit = data.get("commit") or {}
    return FileChange(
        path=content.get("path", path),
        sha=content.get("sha"),
        commit_sha=commit.get("sha", ""),
        commit_message=commit.get("message", ""),
    )
