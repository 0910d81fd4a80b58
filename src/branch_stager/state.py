"""Shared process state for branch-stager.

The configuration, the git working copy, the staging store and the pull
request gateway are built once, on first use, and shared by every tool
module.  Tool modules call ``get_environment()`` instead of building their
own, so all git work in the process goes through the one repository lease.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from .config import Config
from .git.metadata import RepositoryMetadata
from .git.repo import GitRepository
from .github.api import GithubPullRequestGateway, PullRequestGateway
from .store.sqlite import StagingStore

logger = logging.getLogger(__name__)


@dataclass
class Environment:
    config: Config
    repository: GitRepository
    store: StagingStore
    gateway: PullRequestGateway


_ENVIRONMENT: Environment | None = None
_ENVIRONMENT_LOCK = threading.Lock()


def build_environment(config: Config) -> Environment:
    metadata = RepositoryMetadata(
        root=Path(config.repo_path).resolve(),
        base_branch=config.base_branch,
        remote=config.git_remote,
        test_cases_dir=config.test_cases_dir,
        locations_file=config.locations_file,
        owner=config.github_owner,
        repo=config.github_repo,
        non_production=config.non_production,
    )
    repository = GitRepository.open(
        metadata,
        secrets=config.secrets(),
        ssh_key_path=config.git_ssh_key_path,
        reset_on_acquire=config.reset_on_acquire,
    )
    store = StagingStore.open(config.database_path)
    gateway = GithubPullRequestGateway(config.github_token)
    logger.info("Environment ready for %s/%s at %s", config.github_owner, config.github_repo, metadata.root)
    return Environment(config=config, repository=repository, store=store, gateway=gateway)


def get_environment() -> Environment:
    """Return the process-wide environment, building it from the environment variables once."""
    global _ENVIRONMENT
    with _ENVIRONMENT_LOCK:
        if _ENVIRONMENT is None:
            _ENVIRONMENT = build_environment(Config.load_from_env())
        return _ENVIRONMENT


def set_environment(environment: Environment | None) -> None:
    """Replace the shared environment (used by tests)."""
    global _ENVIRONMENT
    with _ENVIRONMENT_LOCK:
        _ENVIRONMENT = environment


def close_environment() -> None:
    global _ENVIRONMENT
    with _ENVIRONMENT_LOCK:
        if _ENVIRONMENT is not None:
            _ENVIRONMENT.store.close()
            _ENVIRONMENT = None
