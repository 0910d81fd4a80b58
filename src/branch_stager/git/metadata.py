"""Layout and pull request settings of the managed repository."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..github.pull_request import PullRequest
from ..models.location import Location
from ..models.test import Test, name_key
from .branch_name import BranchName


def dirname_for_test(test_name: str) -> str:
    """Directory name for a test, which is also its key in the store.

    Raises ``ValueError`` for names without any letter or digit.
    """
    dirname = name_key(test_name)
    if not dirname:
        raise ValueError(f"Test name {test_name!r} needs at least one letter or digit")
    return dirname


@dataclass(frozen=True)
class RepositoryMetadata:
    """Where things live in the working copy and where its PRs go."""

    root: Path
    base_branch: str
    remote: str
    test_cases_dir: str
    locations_file: str
    owner: str
    repo: str
    non_production: bool = False

    def relative_path(self, path: str) -> Path:
        return Path(self.root) / path

    def test_dirpath(self, test_name: str) -> Path:
        """Directory of ``test_name``; always a direct child of the test cases directory."""
        base = self.relative_path(self.test_cases_dir)
        dirpath = base / dirname_for_test(test_name)
        if dirpath.parent != base or dirpath.name in ("", ".", ".."):
            raise ValueError(f"Test name {test_name!r} does not map to a directory under {base}")
        return dirpath

    def locations_path(self) -> Path:
        return self.relative_path(self.locations_file)

    def _finalize(self, pr: PullRequest) -> PullRequest:
        return pr.for_testing_do_not_merge() if self.non_production else pr

    def add_tests_pull_request(self, tests: Sequence[Test], head_branch: BranchName) -> PullRequest:
        return self._finalize(
            PullRequest.for_adding_tests(
                tests, head_branch, base_branch=self.base_branch, owner=self.owner, repo=self.repo
            )
        )

    def add_locations_pull_request(
        self, locations: Sequence[Location], head_branch: BranchName
    ) -> PullRequest:
        return self._finalize(
            PullRequest.for_adding_locations(
                locations, head_branch, base_branch=self.base_branch, owner=self.owner, repo=self.repo
            )
        )

    def remove_tests_pull_request(self, test_names: Sequence[str], head_branch: BranchName) -> PullRequest:
        return self._finalize(
            PullRequest.for_removing_tests(
                test_names, head_branch, base_branch=self.base_branch, owner=self.owner, repo=self.repo
            )
        )
