"""GitHub API integration."""

from .api import GithubPullRequestGateway, PullRequestGateway, PullRequestTransportError
from .auth import get_github_client
from .pull_request import PullRequest

__all__ = [
    "get_github_client",
    "GithubPullRequestGateway",
    "PullRequest",
    "PullRequestGateway",
    "PullRequestTransportError",
]
