"""Location tool implementations."""

from __future__ import annotations

from ..operations.add_locations import AddLocationsSuccess, NoLocationsAdded, add_locations as _add_locations
from ..operations.queries import load_locations
from ..state import get_environment
from ..store.locations import LocationsFilter
from ._results import edit_failure_dict, location_dict, location_error_dict, staged_location_dict


def add_locations(locations: str) -> dict[str, object]:
    """Propose new locations in a pull request.

    ``locations`` holds one ``name, latitude, longitude`` entry per line.
    Invalid lines are reported under ``errors`` and skipped.
    """
    env = get_environment()
    outcome = _add_locations(locations, env.repository, env.store, env.gateway)
    if isinstance(outcome, NoLocationsAdded):
        return {"status": "no_locations_added", "errors": [location_error_dict(e) for e in outcome.errors]}
    if isinstance(outcome, AddLocationsSuccess):
        return {
            "status": "success",
            "branch": str(outcome.branch),
            "branch_deleted_locally": outcome.branch_deleted_locally,
            "locations": [location_dict(loc) for loc in outcome.locations],
            "errors": [location_error_dict(e) for e in outcome.errors],
        }
    return edit_failure_dict(outcome)


def list_locations(merged_only: bool = False) -> dict[str, object]:
    """List known locations, including ones still waiting for review unless ``merged_only``."""
    env = get_environment()
    locations_filter = LocationsFilter.MERGED_ONLY if merged_only else LocationsFilter.ALL
    return {"locations": [staged_location_dict(s) for s in load_locations(env.store, locations_filter)]}
