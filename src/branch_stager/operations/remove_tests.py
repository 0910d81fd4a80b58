"""Propose removing tests and stage the removals until the pull request is merged."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass

from ..git.branch_name import BranchKind, BranchName, new_branch
from ..git.edit import EditOutcome, EditSuccess, run_edit
from ..git.metadata import RepositoryMetadata
from ..git.repo import GitRepository
from ..github.api import PullRequestGateway
from ..models.test import parse_test_names
from ..store.sqlite import StagingStore
from ..store.tests import stage_test_removals

logger = logging.getLogger(__name__)


class NoTestsToRemoveError(LookupError):
    """None of the requested tests exist in the working copy."""


@dataclass(frozen=True)
class RemoveTestsSuccess:
    removed_test_names: tuple[str, ...]
    branch: BranchName
    branch_deleted_locally: bool


@dataclass(frozen=True)
class NoTestsRemoved:
    pass


def _remove_test_dirs(metadata: RepositoryMetadata, test_names: list[str]) -> tuple[str, ...]:
    removed = []
    for name in test_names:
        dirpath = metadata.test_dirpath(name)
        if dirpath.is_dir():
            shutil.rmtree(dirpath)
            removed.append(name)
        else:
            logger.info("No test directory for %r at %s", name, dirpath)
    if not removed:
        raise NoTestsToRemoveError(", ".join(test_names))
    return tuple(removed)


def remove_tests(
    raw_names: str,
    repository: GitRepository,
    store: StagingStore,
    gateway: PullRequestGateway,
) -> RemoveTestsSuccess | NoTestsRemoved | EditOutcome:
    """Delete the named test directories on a new branch and stage the removals.

    ``raw_names`` holds one name per line.  When none of the directories
    exist the branch is abandoned and ``NoTestsRemoved`` returned.
    """
    test_names = parse_test_names(raw_names)
    if not test_names:
        return NoTestsRemoved()

    branch = new_branch(BranchKind.REMOVE_TESTS, test_names[0])
    metadata = repository.metadata

    def mutate():
        removed = _remove_test_dirs(metadata, test_names)
        return metadata.remove_tests_pull_request(removed, branch), removed

    try:
        with repository.transaction() as transaction:
            outcome = run_edit(branch, transaction, gateway, mutate)
    except NoTestsToRemoveError:
        logger.warning("None of the tests to remove exist: %s", ", ".join(test_names))
        return NoTestsRemoved()
    if not isinstance(outcome, EditSuccess):
        return outcome

    with store.transaction() as conn:
        stage_test_removals(conn, outcome.value, branch)
    return RemoveTestsSuccess(outcome.value, branch, outcome.branch_deleted_locally)
