"""Acceptance tests as handed over by the test compiler.

A test is identified by ``name_key(name)``: its name lowercased with every
run of non-alphanumeric characters collapsed to ``-``.  The same key names
the test's directory in the working copy and its rows in the store, so
``"Log In"`` and ``"log-in"`` are one test.  Names without any letter or
digit have no key and are rejected.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field

_KEY_INVALID = re.compile(r"[^a-z0-9]+")


def name_key(name: str) -> str:
    """Logical key of a test name; empty when the name has no letters or digits."""
    return _KEY_INVALID.sub("-", name.strip().lower()).strip("-")


@dataclass(frozen=True)
class TestStep:
    """One step of a test and the requirement that verifies it."""

    __test__ = False

    name: str
    requirement: str
    location_name: str | None = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_json(cls, content: str) -> TestStep:
        data = json.loads(content)
        return cls(
            name=data["name"],
            requirement=data["requirement"],
            location_name=data.get("location_name"),
        )


@dataclass(frozen=True)
class Test:
    """A compiled acceptance test."""

    __test__ = False

    name: str
    description: str | None = None
    steps: tuple[TestStep, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not name_key(self.name):
            raise ValueError(f"Test name {self.name!r} needs at least one letter or digit")

    @property
    def key(self) -> str:
        return name_key(self.name)


def parse_test_names(text: str) -> list[str]:
    """Split a newline separated list of test names.

    Blank lines and names without a key are dropped.  Names sharing a key are
    collapsed to the first spelling.
    """
    seen: set[str] = set()
    names: list[str] = []
    for line in text.splitlines():
        name = line.strip()
        key = name_key(name)
        if key and key not in seen:
            seen.add(key)
            names.append(name)
    return names


@dataclass(frozen=True)
class SearchTestsQuery:
    """Names to look up; no names means every test."""

    names: tuple[str, ...] = ()
    merged_only: bool = False

    @classmethod
    def all_tests(cls, merged_only: bool = False) -> SearchTestsQuery:
        return cls((), merged_only)

    @classmethod
    def from_string(cls, text: str, merged_only: bool = False) -> SearchTestsQuery:
        return cls(tuple(parse_test_names(text)), merged_only)

    @property
    def is_all_tests(self) -> bool:
        return not self.names

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(name_key(name) for name in self.names)
