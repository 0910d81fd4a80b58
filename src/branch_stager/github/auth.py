"""Authentication helpers for GitHub API."""

from __future__ import annotations

import httpx

from ..constants import GITHUB_TIMEOUT_S


def get_github_client(token: str, owner: str) -> httpx.Client:
    """Return a configured GitHub httpx client with the Authorization header set."""
    return httpx.Client(
        headers={
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"branch-stager/{owner}",
        },
        timeout=GITHUB_TIMEOUT_S,
    )
