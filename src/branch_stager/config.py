"""Configuration loading for branch-stager.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.

Required variables:
- GITHUB_TOKEN
- GITHUB_OWNER
- GITHUB_REPO

Optional variables with defaults:
- REPO_PATH (default: './workspace')
- BASE_BRANCH (default: 'main')
- GIT_REMOTE (default: 'origin')
- TEST_CASES_DIR (default: 'acceptance')
- LOCATIONS_FILE (default: 'acceptance/Locations.ts')
- DATABASE_PATH (default: './branch-stager.sqlite')
- NON_PRODUCTION (default: 'false')
- RESET_ON_ACQUIRE (default: 'true')
- GIT_SSH_KEY_PATH (default: unset)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class Config:
    """Configuration values loaded from the environment."""

    github_token: str
    github_owner: str
    github_repo: str
    repo_path: str
    base_branch: str
    git_remote: str
    test_cases_dir: str
    locations_file: str
    database_path: str
    non_production: bool
    reset_on_acquire: bool
    git_ssh_key_path: str | None

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `RuntimeError` if
        required variables are missing.
        """
        load_dotenv()
        missing = []

        github_token = os.getenv("GITHUB_TOKEN")
        if not github_token:
            missing.append("GITHUB_TOKEN")

        github_owner = os.getenv("GITHUB_OWNER")
        if not github_owner:
            missing.append("GITHUB_OWNER")

        github_repo = os.getenv("GITHUB_REPO")
        if not github_repo:
            missing.append("GITHUB_REPO")

        if missing:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            github_token=github_token,
            github_owner=github_owner,
            github_repo=github_repo,
            repo_path=os.getenv("REPO_PATH", "./workspace"),
            base_branch=os.getenv("BASE_BRANCH", "main"),
            git_remote=os.getenv("GIT_REMOTE", "origin"),
            test_cases_dir=os.getenv("TEST_CASES_DIR", "acceptance"),
            locations_file=os.getenv("LOCATIONS_FILE", "acceptance/Locations.ts"),
            database_path=os.getenv("DATABASE_PATH", "./branch-stager.sqlite"),
            non_production=_env_flag("NON_PRODUCTION", False),
            reset_on_acquire=_env_flag("RESET_ON_ACQUIRE", True),
            git_ssh_key_path=os.getenv("GIT_SSH_KEY_PATH") or None,
        )

    def secrets(self) -> list[str]:
        """Values that must never appear in logs or error messages."""
        return [self.github_token]
