"""Pytest configuration and fixtures for branch-stager tests.

This module provides a ``NoopRepositoryClient`` that records the git
operations it is asked to perform without running git, a recording pull
request gateway, and a real bare remote plus clone for integration tests.

IMPORTANT: Environment variables must be set BEFORE importing branch_stager
modules, as the constants module reads them at import time.
"""

from __future__ import annotations

import os

# Set environment variables BEFORE any branch_stager imports
os.environ.setdefault("GITHUB_TOKEN", "test-github-token")
os.environ.setdefault("GITHUB_OWNER", "test-owner")
os.environ.setdefault("GITHUB_REPO", "test-repo")

import subprocess
from pathlib import Path

import pytest

from branch_stager.git.branch_name import BranchName
from branch_stager.git.metadata import RepositoryMetadata
from branch_stager.git.repo import GitCliClient, GitRepository, PullStatus
from branch_stager.github.pull_request import PullRequest
from branch_stager.store.sqlite import StagingStore

GIT_TEST_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@test.com",
}


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` for test setup and return stdout; fails the test on error."""
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env={**os.environ, **GIT_TEST_ENV},
    )
    assert proc.returncode == 0, f"git {' '.join(args)} failed: {proc.stderr}"
    return proc.stdout


def make_metadata(root: Path, non_production: bool = False) -> RepositoryMetadata:
    return RepositoryMetadata(
        root=root,
        base_branch="main",
        remote="origin",
        test_cases_dir="acceptance",
        locations_file="acceptance/Locations.ts",
        owner="test-owner",
        repo="test-repo",
        non_production=non_production,
    )


class NoopRepositoryClient:
    """A repository client that records calls instead of running git.

    File writes made by an edit still land in ``metadata.root`` so tests can
    inspect them.  This is ONLY for testing.
    """

    def __init__(
        self,
        metadata: RepositoryMetadata,
        *,
        should_merge_conflict: bool = False,
        should_delete_branch: bool = True,
    ) -> None:
        self._metadata = metadata
        self.should_merge_conflict = should_merge_conflict
        self.should_delete_branch = should_delete_branch
        self.calls: list[tuple[str, ...]] = []

    @property
    def metadata(self) -> RepositoryMetadata:
        return self._metadata

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def hard_reset_to_head(self) -> None:
        self.calls.append(("hard_reset_to_head",))

    def clean_untracked(self) -> None:
        self.calls.append(("clean_untracked",))

    def switch_branch(self, name: str) -> None:
        self.calls.append(("switch_branch", name))

    def pull_branch(self, name: str) -> PullStatus:
        self.calls.append(("pull_branch", name))
        return PullStatus.MERGE_CONFLICT if self.should_merge_conflict else PullStatus.SUCCESS

    def commit_all(self, message: str) -> None:
        self.calls.append(("commit_all", message))

    def checkout_new_branch(self, branch: BranchName) -> None:
        self.calls.append(("checkout_new_branch", str(branch)))

    def push_changes(self, branch: BranchName) -> None:
        self.calls.append(("push_changes", str(branch)))

    def delete_local_branch(self, branch: BranchName) -> bool:
        self.calls.append(("delete_local_branch", str(branch)))
        return self.should_delete_branch


class RecordingPullRequestGateway:
    """Gateway that accepts (or rejects) every pull request and remembers it."""

    def __init__(self, should_fail: bool = False) -> None:
        self.should_fail = should_fail
        self.opened: list[PullRequest] = []

    def open(self, pull_request: PullRequest) -> bool:
        self.opened.append(pull_request)
        return not self.should_fail


@pytest.fixture
def metadata(tmp_path: Path) -> RepositoryMetadata:
    root = tmp_path / "workspace"
    root.mkdir()
    return make_metadata(root)


@pytest.fixture
def noop_client(metadata: RepositoryMetadata) -> NoopRepositoryClient:
    return NoopRepositoryClient(metadata)


@pytest.fixture
def noop_repository(noop_client: NoopRepositoryClient) -> GitRepository:
    return GitRepository(noop_client)


@pytest.fixture
def gateway() -> RecordingPullRequestGateway:
    return RecordingPullRequestGateway()


@pytest.fixture
def store():
    staging_store = StagingStore.in_memory()
    yield staging_store
    staging_store.close()


@pytest.fixture
def git_remote(tmp_path: Path) -> tuple[Path, Path]:
    """Create a bare ``origin`` with one commit on ``main`` and a clone of it.

    Returns ``(remote_path, clone_path)``.
    """
    remote = tmp_path / "remote.git"
    seed = tmp_path / "seed"
    clone = tmp_path / "clone"

    git(tmp_path, "init", "--bare", "--initial-branch=main", str(remote))
    git(tmp_path, "init", "--initial-branch=main", str(seed))
    (seed / "README.md").write_text("# Acceptance tests\n", encoding="utf-8")
    (seed / "acceptance").mkdir()
    (seed / "acceptance" / "Locations.ts").write_text("export const TestLocations = {}\n", encoding="utf-8")
    git(seed, "add", "-A")
    git(seed, "commit", "-m", "Initial commit")
    git(seed, "remote", "add", "origin", str(remote))
    git(seed, "push", "origin", "main")
    git(tmp_path, "clone", str(remote), str(clone))
    return remote, clone


@pytest.fixture
def git_cli_client(git_remote: tuple[Path, Path]) -> GitCliClient:
    _, clone = git_remote
    return GitCliClient(make_metadata(clone), secrets=["test-github-token"])


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up basic test environment."""
    monkeypatch.setenv("GITHUB_TOKEN", "test-github-token")
    monkeypatch.setenv("GITHUB_OWNER", "test-owner")
    monkeypatch.setenv("GITHUB_REPO", "test-repo")
    for name in GIT_TEST_ENV:
        monkeypatch.setenv(name, GIT_TEST_ENV[name])


@pytest.fixture
def run_git():
    """The ``git`` setup helper, for tests that need extra commits or clones."""
    return git
