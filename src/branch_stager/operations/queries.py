"""Read-only views over the staging store."""

from __future__ import annotations

from ..models.location import Location
from ..models.staged import Staged
from ..models.test import SearchTestsQuery, Test
from ..store.locations import LocationsFilter, locations_in_alphabetical_order
from ..store.sqlite import StagingStore
from ..store.tests import tests_in_alphabetical_order


def load_locations(
    store: StagingStore, locations_filter: LocationsFilter = LocationsFilter.ALL
) -> list[Staged[Location]]:
    with store.transaction() as conn:
        return locations_in_alphabetical_order(conn, locations_filter)


def search_tests(store: StagingStore, raw_query: str, merged_only: bool = False) -> list[Staged[Test]]:
    """Look up tests by newline separated names; blank input lists every test."""
    query = SearchTestsQuery.from_string(raw_query, merged_only)
    with store.transaction() as conn:
        return tests_in_alphabetical_order(conn, query)
