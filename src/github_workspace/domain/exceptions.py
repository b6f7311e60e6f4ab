"""Domain exception hierarchy.

The adapter raises these; the interface layer's error handlers translate
them into HTTP responses.
"""

from __future__ import annotations


class GitHubWorkspaceError(Exception):
    """Base exception for the entire application."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class GitHubApiError(GitHubWorkspaceError):
    """GitHub answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"GitHub API error: {status_code} {reason} - {body}")


class GitHubTransportError(GitHubWorkspaceError):
    """The request never produced an HTTP response (network failure)."""


class ContentUnavailableError(GitHubWorkspaceError):
    """A contents response carries neither inline content nor a download URL."""


# ── Interface errors ────────────────────────────────────────────────────────


class MissingTokenError(GitHubWorkspaceError):
    """No GitHub token was supplied with the request or in the configuration."""
