"""API routes — thin controllers that delegate to the repository host."""

from __future__ import annotations

import posixpath

from fastapi import APIRouter, Depends, Query, status

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
from github_workspace.domain.ports.repo_host import RepoHost
from github_workspace.interface.dependencies import get_repo_host
from github_workspace.interface.schemas import (
    CreateBranchRequest,
    CreateRepositoryRequest,
    DeleteFileRequest,
    ErrorResponse,
    ExistsResponse,
    FileContentResponse,
    UploadFilesRequest,
    WriteFileRequest,
)

router = APIRouter()

_UPSTREAM_ERRORS = {
    401: {"model": ErrorResponse, "description": "No GitHub token, or GitHub rejected it"},
    404: {"model": ErrorResponse, "description": "Not found on GitHub"},
    502: {"model": ErrorResponse, "description": "GitHub unreachable or returned a server error"},
}


# ── User & repositories ─────────────────────────────────────────────────────


@router.get("/user", response_model=GitHubUser, responses=_UPSTREAM_ERRORS)
async def get_user(host: RepoHost = Depends(get_repo_host)) -> GitHubUser:
    return await host.get_user()


@router.get("/repos", response_model=list[GitHubRepo], responses=_UPSTREAM_ERRORS)
async def list_repositories(
    host: RepoHost = Depends(get_repo_host),
) -> list[GitHubRepo]:
    """Repositories of the token's owner, most recently updated first."""
    return await host.get_repositories()


@router.post(
    "/repos",
    response_model=GitHubRepo,
    status_code=status.HTTP_201_CREATED,
    responses=_UPSTREAM_ERRORS,
)
async def create_repository(
    body: CreateRepositoryRequest,
    host: RepoHost = Depends(get_repo_host),
) -> GitHubRepo:
    return await host.create_repository(body.name, body.description, body.private)


@router.get("/repos/{name}", response_model=GitHubRepo, responses=_UPSTREAM_ERRORS)
async def get_repository(
    name: str, host: RepoHost = Depends(get_repo_host)
) -> GitHubRepo:
    return await host.get_repository(name)


@router.get("/repos/{name}/exists", response_model=ExistsResponse)
async def repository_exists(
    name: str, host: RepoHost = Depends(get_repo_host)
) -> ExistsResponse:
    return ExistsResponse(exists=await host.check_repository_exists(name))


# ── Branches & history ──────────────────────────────────────────────────────


@router.get(
    "/repos/{owner}/{repo}/branches",
    response_model=list[GitHubBranch],
    responses=_UPSTREAM_ERRORS,
)
async def list_branches(
    owner: str, repo: str, host: RepoHost = Depends(get_repo_host)
) -> list[GitHubBranch]:
    return await host.get_branches(owner, repo)


@router.post(
    "/repos/{owner}/{repo}/branches",
    response_model=GitRef,
    status_code=status.HTTP_201_CREATED,
    responses=_UPSTREAM_ERRORS,
)
async def create_branch(
    owner: str,
    repo: str,
    body: CreateBranchRequest,
    host: RepoHost = Depends(get_repo_host),
) -> GitRef:
    return await host.create_branch(owner, repo, body.name, body.from_sha)


@router.get(
    "/repos/{owner}/{repo}/commits",
    response_model=list[GitHubCommit],
    responses=_UPSTREAM_ERRORS,
)
async def list_commits(
    owner: str,
    repo: str,
    branch: str = "main",
    host: RepoHost = Depends(get_repo_host),
) -> list[GitHubCommit]:
    return await host.get_commits(owner, repo, branch)


@router.get(
    "/repos/{owner}/{repo}/tree", response_model=GitTree, responses=_UPSTREAM_ERRORS
)
async def get_tree(
    owner: str,
    repo: str,
    branch: str = "main",
    recursive: bool = False,
    host: RepoHost = Depends(get_repo_host),
) -> GitTree:
    return await host.get_repository_tree(owner, repo, branch, recursive)


# ── Contents ────────────────────────────────────────────────────────────────


@router.get(
    "/repos/{owner}/{repo}/contents",
    response_model=list[GitHubFile],
    responses=_UPSTREAM_ERRORS,
)
async def list_contents(
    owner: str,
    repo: str,
    path: str = "",
    branch: str = "main",
    host: RepoHost = Depends(get_repo_host),
) -> list[GitHubFile]:
    return await host.get_repo_contents(owner, repo, path, branch)


@router.get(
    "/repos/{owner}/{repo}/file",
    response_model=FileContentResponse,
    responses=_UPSTREAM_ERRORS,
)
async def read_file(
    owner: str,
    repo: str,
    path: str = Query(min_length=1),
    branch: str = "main",
    host: RepoHost = Depends(get_repo_host),
) -> FileContentResponse:
    content = await host.get_file_content(owner, repo, path, branch)
    return FileContentResponse(path=path, branch=branch, content=content)


@router.put(
    "/repos/{owner}/{repo}/file",
    response_model=FileChange,
    responses=_UPSTREAM_ERRORS,
)
async def write_file(
    owner: str,
    repo: str,
    body: WriteFileRequest,
    host: RepoHost = Depends(get_repo_host),
) -> FileChange:
    """Update a file, or create it when it does not exist on the branch."""
    return await host.update_file(
        owner, repo, body.path, body.content, body.message, body.sha, body.branch
    )


@router.delete(
    "/repos/{owner}/{repo}/file",
    response_model=FileChange,
    responses=_UPSTREAM_ERRORS,
)
async def delete_file(
    owner: str,
    repo: str,
    body: DeleteFileRequest,
    host: RepoHost = Depends(get_repo_host),
) -> FileChange:
    return await host.delete_file(
        owner, repo, body.path, body.message, body.sha, body.branch
    )


@router.post(
    "/repos/{owner}/{repo}/upload",
    response_model=list[FileChange],
    responses=_UPSTREAM_ERRORS,
)
async def upload_files(
    owner: str,
    repo: str,
    body: UploadFilesRequest,
    host: RepoHost = Depends(get_repo_host),
) -> list[FileChange]:
    """Write several files in order; the first failure aborts the rest."""
    files = [
        UploadFile(
            path=item.path,
            content=item.content,
            name=item.name or posixpath.basename(item.path),
        )
        for item in body.files
    ]
    return await host.upload_multiple_files(owner, repo, files, body.branch)
