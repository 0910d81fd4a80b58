"""Locations and the plain-text format used to submit them.

A locations string is a newline separated list of lines shaped like::

    <location name>, <latitude>, <longitude>

Blank lines are ignored.  Lines that fail to parse are kept as
``LocationParseError`` values so callers can report them next to the
successfully parsed locations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_\s]*[a-zA-Z]+[a-zA-Z0-9_\s]*$")


class LocationErrorCode(Enum):
    EMPTY_NAME = "empty_name"
    INVALID_NAME = "invalid_name"
    INVALID_COORDINATE = "invalid_coordinate"


@dataclass(frozen=True)
class Location:
    name: str
    latitude: float
    longitude: float

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class LocationParseError:
    raw_name: str
    code: LocationErrorCode


def validate_coordinate(latitude: float, longitude: float) -> bool:
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


def parse_location_line(line: str) -> Location | LocationParseError:
    parts = line.split(",", 2)
    raw_name = parts[0].strip()
    if not raw_name:
        return LocationParseError(raw_name, LocationErrorCode.EMPTY_NAME)
    if not _NAME_PATTERN.match(raw_name):
        return LocationParseError(raw_name, LocationErrorCode.INVALID_NAME)
    if len(parts) < 3:
        return LocationParseError(raw_name, LocationErrorCode.INVALID_COORDINATE)
    try:
        latitude = float(parts[1].strip())
        longitude = float(parts[2].strip())
    except ValueError:
        return LocationParseError(raw_name, LocationErrorCode.INVALID_COORDINATE)
    if not validate_coordinate(latitude, longitude):
        return LocationParseError(raw_name, LocationErrorCode.INVALID_COORDINATE)
    return Location(raw_name, latitude, longitude)


@dataclass(frozen=True)
class ParsedLocations:
    """Parse results of a locations string in their original order."""

    results: tuple[Location | LocationParseError, ...]

    @classmethod
    def from_string(cls, text: str) -> ParsedLocations:
        return cls(tuple(parse_location_line(line) for line in text.splitlines() if line.strip()))

    @property
    def locations(self) -> list[Location]:
        return [r for r in self.results if isinstance(r, Location)]

    @property
    def errors(self) -> list[LocationParseError]:
        return [r for r in self.results if isinstance(r, LocationParseError)]
