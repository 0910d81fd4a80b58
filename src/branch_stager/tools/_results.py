"""Conversions from operation outcomes to tool results."""

from __future__ import annotations

from ..git.branch_name import BranchName
from ..git.edit import FailedToOpenPullRequest, MergeConflict
from ..models.location import Location, LocationParseError
from ..models.staged import Staged
from ..models.test import Test


def branch_value(branch: BranchName | None) -> str | None:
    return str(branch) if branch is not None else None


def location_dict(location: Location) -> dict[str, object]:
    return {"name": location.name, "latitude": location.latitude, "longitude": location.longitude}


def location_error_dict(error: LocationParseError) -> dict[str, object]:
    return {"name": error.raw_name, "code": error.code.value}


def staged_location_dict(staged: Staged[Location]) -> dict[str, object]:
    return {**location_dict(staged.value), "unmerged_branch": branch_value(staged.unmerged_branch)}


def test_dict(test: Test) -> dict[str, object]:
    return {
        "name": test.name,
        "description": test.description,
        "steps": [
            {"name": step.name, "requirement": step.requirement, "location_name": step.location_name}
            for step in test.steps
        ],
    }


def staged_test_dict(staged: Staged[Test]) -> dict[str, object]:
    return {**test_dict(staged.value), "unmerged_branch": branch_value(staged.unmerged_branch)}


def edit_failure_dict(outcome: object) -> dict[str, object] | None:
    """Result for the edit outcomes every proposing tool shares, else ``None``."""
    if isinstance(outcome, MergeConflict):
        return {"status": "merge_conflict"}
    if isinstance(outcome, FailedToOpenPullRequest):
        return {"status": "failed_to_open_pull_request"}
    return None
