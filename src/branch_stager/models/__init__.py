"""Domain records handled by branch-stager."""

from .location import Location, LocationErrorCode, LocationParseError, ParsedLocations
from .staged import Staged
from .test import SearchTestsQuery, Test, TestStep, name_key, parse_test_names

__all__ = [
    "Location",
    "LocationErrorCode",
    "LocationParseError",
    "ParsedLocations",
    "SearchTestsQuery",
    "Staged",
    "Test",
    "TestStep",
    "name_key",
    "parse_test_names",
]
