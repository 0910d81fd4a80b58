"""The edit workflow: branch, mutate, commit, push, request review, clean up.

``run_edit`` drives one proposal through a ``RepositoryTransaction`` and a
``PullRequestGateway``.  Business outcomes (``EditSuccess``, ``MergeConflict``,
``FailedToOpenPullRequest``) are returned; environment failures raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from ..github.api import PullRequestGateway
from ..github.pull_request import PullRequest
from .branch_name import BranchName
from .repo import PullStatus, RepositoryTransaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class EditSuccess(Generic[T]):
    """The change was pushed and its pull request opened.

    ``branch_deleted_locally`` is ``False`` when the local branch could not be
    removed afterwards; the change itself is safely on the remote either way.
    """

    branch_deleted_locally: bool
    value: T


@dataclass(frozen=True)
class MergeConflict:
    """The base branch could not be updated without manual intervention."""


@dataclass(frozen=True)
class FailedToOpenPullRequest:
    """The change was pushed, but the review service rejected the pull request."""


EditOutcome = Union[EditSuccess[T], MergeConflict, FailedToOpenPullRequest]

Mutation = Callable[[], tuple[PullRequest, T]]


def run_edit(
    new_branch: BranchName,
    transaction: RepositoryTransaction,
    gateway: PullRequestGateway,
    mutate: Mutation,
    base_branch: str | None = None,
) -> EditOutcome:
    """Propose the changes made by ``mutate`` on ``new_branch``.

    ``mutate`` runs with ``new_branch`` checked out, writes files into the
    working copy and returns the pull request describing them together with
    a caller value that ends up in ``EditSuccess.value``.

    The base branch is switched to and pulled first; a conflict there returns
    ``MergeConflict`` without committing, pushing or opening anything and
    leaves the working copy as git left it.  If ``mutate`` raises, the working
    copy is reset, the base branch checked out again, the new branch deleted
    and the error re-raised.  The transaction is released before the pull
    request is opened, so a slow review service never holds up other git
    operations.  A rejected pull request yields ``FailedToOpenPullRequest``;
    the branch is already pushed at that point and must not be re-created.
    """
    base = base_branch or transaction.metadata.base_branch

    transaction.switch_branch(base)
    if transaction.pull_branch(base) is PullStatus.MERGE_CONFLICT:
        logger.warning("Merge conflict updating %s before editing %s", base, new_branch)
        return MergeConflict()

    transaction.checkout_new_branch(new_branch)
    try:
        pull_request, value = mutate()
    except Exception:
        logger.exception("Edit on %s failed, restoring %s", new_branch, base)
        _abandon(transaction, new_branch, base)
        raise

    transaction.commit_all(pull_request.title)
    transaction.push_changes(new_branch)
    transaction.switch_branch(base)
    branch_deleted_locally = transaction.delete_local_branch(new_branch)
    transaction.release()

    if not gateway.open(pull_request):
        logger.warning("Pushed %s but the pull request was not opened", new_branch)
        return FailedToOpenPullRequest()
    return EditSuccess(branch_deleted_locally=branch_deleted_locally, value=value)


def _abandon(transaction: RepositoryTransaction, branch: BranchName, base: str) -> None:
    # Best effort; the caller re-raises the mutation's error, not these.
    try:
        transaction.hard_reset_to_head()
        transaction.clean_untracked()
        transaction.switch_branch(base)
        transaction.delete_local_branch(branch)
    except Exception:
        logger.exception("Failed to restore %s after abandoning %s", base, branch)
