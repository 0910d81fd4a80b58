"""Tools called when a pull request opened by branch-stager is merged or closed."""

from __future__ import annotations

from ..operations.branches import Closed, Merged, close_branch as _close_branch, merge_branch as _merge_branch
from ..state import get_environment


def merge_branch(branch: str) -> dict[str, object]:
    """Make everything staged on ``branch`` canonical."""
    outcome = _merge_branch(branch, get_environment().store)
    if isinstance(outcome, Merged):
        return {"status": "merged", "kind": outcome.kind.value}
    return {"status": "unknown_branch_kind", "branch": outcome.branch}


def close_branch(branch: str) -> dict[str, object]:
    """Discard everything staged on ``branch``."""
    outcome = _close_branch(branch, get_environment().store)
    if isinstance(outcome, Closed):
        return {"status": "closed", "kind": outcome.kind.value}
    return {"status": "unknown_branch_kind", "branch": outcome.branch}
