"""Pull request descriptions built from submitted content."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass

from ..git.branch_name import BranchName
from ..models.location import Location
from ..models.test import Test
from . import templates

DO_NOT_MERGE_PREFIX = "[DO NOT MERGE] "
_TITLE_NAMES_LIMIT = 3


def _title(action: str, names: Sequence[str]) -> str:
    shown = ", ".join(names[:_TITLE_NAMES_LIMIT])
    hidden = len(names) - _TITLE_NAMES_LIMIT
    if hidden > 0:
        shown += f" and {hidden} more"
    return f"{action} {shown}"


@dataclass(frozen=True)
class PullRequest:
    """A pull request to open against ``owner/repo``."""

    title: str
    body: str
    head_branch: BranchName
    base_branch: str
    owner: str
    repo: str

    @property
    def repo_slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def to_payload(self) -> dict[str, object]:
        return {
            "title": self.title,
            "body": self.body,
            "head": str(self.head_branch),
            "base": self.base_branch,
        }

    def for_testing_do_not_merge(self) -> PullRequest:
        """Return a copy marked as opened from a non-production environment."""
        if self.title.startswith(DO_NOT_MERGE_PREFIX):
            return self
        return dataclasses.replace(
            self,
            title=DO_NOT_MERGE_PREFIX + self.title,
            body=templates.DO_NOT_MERGE_NOTE + "\n" + self.body,
        )

    @classmethod
    def for_adding_tests(
        cls, tests: Sequence[Test], head_branch: BranchName, *, base_branch: str, owner: str, repo: str
    ) -> PullRequest:
        return cls(
            title=_title("Add Tests", [t.name for t in tests]),
            body=templates.add_tests_body(tests),
            head_branch=head_branch,
            base_branch=base_branch,
            owner=owner,
            repo=repo,
        )

    @classmethod
    def for_adding_locations(
        cls, locations: Sequence[Location], head_branch: BranchName, *, base_branch: str, owner: str, repo: str
    ) -> PullRequest:
        return cls(
            title=_title("Add Locations", [loc.name for loc in locations]),
            body=templates.add_locations_body(locations),
            head_branch=head_branch,
            base_branch=base_branch,
            owner=owner,
            repo=repo,
        )

    @classmethod
    def for_removing_tests(
        cls, test_names: Sequence[str], head_branch: BranchName, *, base_branch: str, owner: str, repo: str
    ) -> PullRequest:
        return cls(
            title=_title("Remove Tests", list(test_names)),
            body=templates.remove_tests_body(test_names),
            head_branch=head_branch,
            base_branch=base_branch,
            owner=owner,
            repo=repo,
        )
