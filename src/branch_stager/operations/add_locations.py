"""Propose new locations and stage them until the pull request is merged."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..generation.typescript import write_locations
from ..git.branch_name import BranchKind, BranchName, new_branch
from ..git.edit import EditOutcome, EditSuccess, run_edit
from ..git.repo import GitRepository
from ..github.api import PullRequestGateway
from ..models.location import Location, LocationParseError, ParsedLocations
from ..store.locations import LocationsFilter, locations_in_alphabetical_order, save_locations
from ..store.sqlite import StagingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddLocationsSuccess:
    locations: tuple[Location, ...]
    errors: tuple[LocationParseError, ...]
    branch: BranchName
    branch_deleted_locally: bool


@dataclass(frozen=True)
class NoLocationsAdded:
    errors: tuple[LocationParseError, ...] = ()


def add_locations(
    raw: str,
    repository: GitRepository,
    store: StagingStore,
    gateway: PullRequestGateway,
) -> AddLocationsSuccess | NoLocationsAdded | EditOutcome:
    """Parse ``raw`` locations, propose them on a new branch and stage them.

    Lines that fail to parse are reported in ``errors`` and left out of the
    proposal.  Returns ``NoLocationsAdded`` when no line is valid.
    """
    parsed = ParsedLocations.from_string(raw)
    by_key = {location.key: location for location in parsed.locations}
    locations = tuple(by_key.values())
    if not locations:
        return NoLocationsAdded(tuple(parsed.errors))

    with store.transaction() as conn:
        canonical = [staged.value for staged in locations_in_alphabetical_order(conn, LocationsFilter.MERGED_ONLY)]

    branch = new_branch(BranchKind.ADD_LOCATIONS, locations[0].name)
    metadata = repository.metadata

    def mutate():
        merged = {location.key: location for location in canonical}
        merged.update(by_key)
        write_locations(metadata, merged.values())
        return metadata.add_locations_pull_request(locations, branch), locations

    with repository.transaction() as transaction:
        outcome = run_edit(branch, transaction, gateway, mutate)
    if not isinstance(outcome, EditSuccess):
        return outcome

    with store.transaction() as conn:
        save_locations(conn, locations, branch)
    logger.info("Staged %d locations on %s", len(locations), branch)
    return AddLocationsSuccess(
        locations=locations,
        errors=tuple(parsed.errors),
        branch=branch,
        branch_deleted_locally=outcome.branch_deleted_locally,
    )
