"""Operations exposed to callers; each returns an outcome value."""

from .add_locations import AddLocationsSuccess, NoLocationsAdded, add_locations
from .add_tests import AddTestsSuccess, NoTestsAdded, add_tests
from .branches import Closed, Merged, UnknownBranchKind, close_branch, merge_branch
from .queries import load_locations, search_tests
from .remove_tests import NoTestsRemoved, RemoveTestsSuccess, remove_tests

__all__ = [
    "AddLocationsSuccess",
    "AddTestsSuccess",
    "Closed",
    "Merged",
    "NoLocationsAdded",
    "NoTestsAdded",
    "NoTestsRemoved",
    "RemoveTestsSuccess",
    "UnknownBranchKind",
    "add_locations",
    "add_tests",
    "close_branch",
    "load_locations",
    "merge_branch",
    "remove_tests",
    "search_tests",
]
