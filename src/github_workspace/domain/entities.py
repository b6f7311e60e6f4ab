"""Domain entities — response shapes of the GitHub REST API."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class GitHubUser:
    """The authenticated user's profile."""

    login: str
    id: int
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    public_repos: int = 0


@dataclass(frozen=True, slots=True)
class GitHubRepo:
    """Repository descriptor."""

    id: int
    name: str
    full_name: str
    owner: str
    description: str | None = None
    private: bool = False
    default_branch: str = "main"
    html_url: str | None = None
    clone_url: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True, slots=True)
class GitHubBranch:
    name: str
    commit_sha: str
    protected: bool = False


@dataclass(frozen=True, slots=True)
class GitHubFile:
    """A single entry from the contents API (file or directory)."""

    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"
    size: int = 0
    sha: str = ""
    download_url: str | None = None


@dataclass(frozen=True, slots=True)
class GitHubCommit:
    sha: str
    message: str
    author_name: str | None = None
    author_email: str | None = None
    date: str | None = None
    html_url: str | None = None


@dataclass(frozen=True, slots=True)
class FileChange:
    """Outcome of a create / update / delete on the contents API."""

    path: str
    sha: str | None
    commit_sha: str
    commit_message: str = ""


@dataclass(frozen=True, slots=True)
class GitRef:
    ref: str
    sha: str


@dataclass(frozen=True, slots=True)
class TreeEntry:
    path: str
    type: str  # "blob", "tree" or "commit"
    sha: str
    size: int = 0
    mode: str = ""


@dataclass(frozen=True, slots=True)
class GitTree:
    sha: str
    truncated: bool = False
    entries: list[TreeEntry] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UploadFile:
    """One file handed to the multi-file upload."""

    path: str
    content: str
    name: str
