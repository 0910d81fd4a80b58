"""GitHub REST API wrapper for opening pull requests."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ..constants import GITHUB_API_URL
from ..policy.redaction import redact_secrets
from .auth import get_github_client
from .pull_request import PullRequest

logger = logging.getLogger(__name__)


class PullRequestTransportError(RuntimeError):
    """The review service could not be reached."""


class PullRequestGateway(Protocol):
    """Opens pull requests on a review service.

    ``open`` returns ``False`` when the service answered but did not accept
    the pull request, and raises when it could not be reached at all.
    """

    def open(self, pull_request: PullRequest) -> bool:
        ...


class GithubPullRequestGateway:
    """``PullRequestGateway`` backed by the GitHub REST API."""

    def __init__(self, token: str, *, api_url: str = GITHUB_API_URL) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")

    def open(self, pull_request: PullRequest) -> bool:
        url = f"{self._api_url}/repos/{pull_request.repo_slug}/pulls"
        try:
            with get_github_client(self._token, pull_request.owner) as client:
                resp = client.post(url, json=pull_request.to_payload())
        except httpx.HTTPError as exc:
            message = redact_secrets(str(exc), [self._token])
            logger.error("GitHub API request failed: %s", message)
            raise PullRequestTransportError(f"GitHub API request failed: {message}") from exc

        if 200 <= resp.status_code < 300:
            logger.info("Opened pull request for %s on %s", pull_request.head_branch, pull_request.repo_slug)
            return True

        logger.warning(
            "GitHub rejected pull request for %s with %s: %s",
            pull_request.head_branch,
            resp.status_code,
            redact_secrets(resp.text, [self._token]),
        )
        return False
