"""Staged and canonical locations."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from enum import Enum

from ..git.branch_name import BranchName
from ..models.location import Location
from ..models.staged import Staged


class LocationsFilter(Enum):
    MERGED_ONLY = "merged_only"
    ALL = "all"


def _last_occurrence_by_key(locations: Iterable[Location]) -> list[Location]:
    by_key: dict[str, Location] = {}
    for location in locations:
        by_key.pop(location.key, None)
        by_key[location.key] = location
    return list(by_key.values())


def save_locations(conn: sqlite3.Connection, locations: Iterable[Location], branch: BranchName) -> None:
    """Stage ``locations`` on ``branch``, replacing what the branch already staged."""
    for location in _last_occurrence_by_key(locations):
        conn.execute(
            """
            INSERT INTO Locations (name, latitude, longitude, unmerged_branch_name)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (name, unmerged_branch_name) DO UPDATE SET
                name = excluded.name,
                latitude = excluded.latitude,
                longitude = excluded.longitude
            """,
            (location.name, location.latitude, location.longitude, str(branch)),
        )


def merge_locations(conn: sqlite3.Connection, branch: BranchName) -> None:
    """Promote the locations staged on ``branch`` to canonical."""
    conn.execute(
        """
        DELETE FROM Locations
        WHERE unmerged_branch_name IS NULL
          AND name IN (SELECT name FROM Locations WHERE unmerged_branch_name = ?)
        """,
        (str(branch),),
    )
    conn.execute(
        "UPDATE Locations SET unmerged_branch_name = NULL WHERE unmerged_branch_name = ?",
        (str(branch),),
    )


def close_locations(conn: sqlite3.Connection, branch: BranchName) -> None:
    conn.execute("DELETE FROM Locations WHERE unmerged_branch_name = ?", (str(branch),))


def locations_in_alphabetical_order(
    conn: sqlite3.Connection, locations_filter: LocationsFilter = LocationsFilter.ALL
) -> list[Staged[Location]]:
    """Locations ordered by name; for each name the canonical row comes first."""
    where = "WHERE unmerged_branch_name IS NULL" if locations_filter is LocationsFilter.MERGED_ONLY else ""
    rows = conn.execute(
        f"""
        SELECT name, latitude, longitude, unmerged_branch_name
        FROM Locations
        {where}
        ORDER BY name, unmerged_branch_name IS NOT NULL, unmerged_branch_name
        """
    ).fetchall()
    return [
        Staged(
            Location(row["name"], row["latitude"], row["longitude"]),
            BranchName.parse(row["unmerged_branch_name"]) if row["unmerged_branch_name"] else None,
        )
        for row in rows
    ]
