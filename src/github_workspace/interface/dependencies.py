"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx
from fastapi import Header

from github_workspace.domain.exceptions import MissingTokenError
from github_workspace.infrastructure.config import get_settings
from github_workspace.infrastructure.github_rest_adapter import GitHubRestAdapter

_http_client: httpx.AsyncClient | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


def _resolve_token(authorization: str | None) -> str:
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() in ("bearer", "token") and credentials.strip():
            return credentials.strip()

    settings = get_settings()
    if settings.github_token:
        return settings.github_token.get_secret_value()

    raise MissingTokenError(
        "No GitHub token supplied. Send 'Authorization: Bearer <token>' "
        "or set the GITHUB_TOKEN environment variable."
    )


def get_repo_host(
    authorization: str | None = Header(default=None),
) -> GitHubRestAdapter:
    """Build an adapter bound to the caller's token and the shared HTTP client."""
    token = _resolve_token(authorization)
    assert _http_client is not None, "startup() was not called"

    settings = get_settings()
    return GitHubRestAdapter(
        client=_http_client,
        token=token,
        base_url=settings.github_api_url,
        user_agent=settings.user_agent,
    )
