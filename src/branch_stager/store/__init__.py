"""SQLite cache of canonical and branch-staged entities."""

from .locations import (
    LocationsFilter,
    close_locations,
    locations_in_alphabetical_order,
    merge_locations,
    save_locations,
)
from .sqlite import StagingStore
from .tests import (
    close_test_removals,
    close_tests,
    merge_test_removals,
    merge_tests,
    save_tests,
    stage_test_removals,
    staged_test_removals,
    tests_in_alphabetical_order,
)

__all__ = [
    "LocationsFilter",
    "StagingStore",
    "close_locations",
    "close_test_removals",
    "close_tests",
    "locations_in_alphabetical_order",
    "merge_locations",
    "merge_test_removals",
    "merge_tests",
    "save_locations",
    "save_tests",
    "stage_test_removals",
    "staged_test_removals",
    "tests_in_alphabetical_order",
]
