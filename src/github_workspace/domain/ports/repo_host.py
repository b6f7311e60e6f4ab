"""Port: repository host — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol, Sequence

from github_workspace.domain.entities import (
    FileChange,
    GitHubBranch,
    GitHubCommit,
    GitHubFile,
    GitHubRepo,
    GitHubUser,
    GitRef,
    GitTree,
    UploadFile,
)


class RepoHost(Protocol):
    """Abstract contract for a remote repository-hosting service."""

    async def get_user(self) -> GitHubUser:
        """Return the authenticated user."""
        ...

    async def get_repositories(self) -> list[GitHubRepo]:
        """Return the user's repositories, most recently updated first."""
        ...

    async def get_repository(self, name: str) -> GitHubRepo: ...

    async def check_repository_exists(self, name: str) -> bool: ...

    async def create_repository(
        self, name: str, description: str, private: bool
    ) -> GitHubRepo: ...

    async def get_branches(self, owner: str, repo: str) -> list[GitHubBranch]: ...

    async def get_branch(self, owner: str, repo: str, branch: str) -> GitHubBranch: ...

    async def get_repo_contents(
        self, owner: str, repo: str, path: str = "", branch: str = "main"
    ) -> list[GitHubFile]:
        """List a directory, or describe a single file as a one-item list."""
        ...

    async def get_file_content(
        self, owner: str, repo: str, path: str, branch: str = "main"
    ) -> str:
        """Return the decoded text content of a single file."""
        ...

    async def get_commits(
        self, owner: str, repo: str, branch: str = "main"
    ) -> list[GitHubCommit]: ...

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str = "main",
    ) -> FileChange: ...

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str | None = None,
        branch: str = "main",
    ) -> FileChange:
        """Update a file, creating it when it does not exist yet."""
        ...

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str = "main",
    ) -> FileChange: ...

    async def create_branch(
        self, owner: str, repo: str, new_branch: str, from_sha: str
    ) -> GitRef: ...

    async def upload_multiple_files(
        self,
        owner: str,
        repo: str,
        files: Sequence[UploadFile],
        branch: str = "main",
    ) -> list[FileChange]:
        """Write each file in turn, creating or updating as needed."""
        ...

    async def get_repository_tree(
        self, owner: str, repo: str, branch: str = "main", recursive: bool = False
    ) -> GitTree: ...
