"""Merge or close a staging branch once its pull request is resolved."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass

from ..git.branch_name import BranchKind, BranchName
from ..store.locations import close_locations, merge_locations
from ..store.sqlite import StagingStore
from ..store.tests import close_test_removals, close_tests, merge_test_removals, merge_tests

logger = logging.getLogger(__name__)

_StoreStep = Callable[[sqlite3.Connection, BranchName], None]

_MERGE_STEPS: dict[BranchKind, _StoreStep] = {
    BranchKind.ADD_LOCATIONS: merge_locations,
    BranchKind.ADD_TESTS: merge_tests,
    BranchKind.REMOVE_TESTS: merge_test_removals,
}

_CLOSE_STEPS: dict[BranchKind, _StoreStep] = {
    BranchKind.ADD_LOCATIONS: close_locations,
    BranchKind.ADD_TESTS: close_tests,
    BranchKind.REMOVE_TESTS: close_test_removals,
}


@dataclass(frozen=True)
class Merged:
    kind: BranchKind


@dataclass(frozen=True)
class Closed:
    kind: BranchKind


@dataclass(frozen=True)
class UnknownBranchKind:
    branch: str


def merge_branch(raw: str, store: StagingStore) -> Merged | UnknownBranchKind:
    """Promote everything staged on ``raw`` to canonical."""
    branch = BranchName.parse(raw.strip())
    step = _MERGE_STEPS.get(branch.kind)
    if step is None:
        return UnknownBranchKind(branch.raw)
    with store.transaction() as conn:
        step(conn, branch)
    logger.info("Merged %s", branch)
    return Merged(branch.kind)


def close_branch(raw: str, store: StagingStore) -> Closed | UnknownBranchKind:
    """Discard everything staged on ``raw``; closing twice is harmless."""
    branch = BranchName.parse(raw.strip())
    step = _CLOSE_STEPS.get(branch.kind)
    if step is None:
        return UnknownBranchKind(branch.raw)
    with store.transaction() as conn:
        step(conn, branch)
    logger.info("Closed %s", branch)
    return Closed(branch.kind)
