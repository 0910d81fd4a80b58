"""Templates for generating GitHub PR bodies."""

from __future__ import annotations

from collections.abc import Sequence

from ..models.location import Location
from ..models.test import Test

DO_NOT_MERGE_NOTE = (
    "> [!WARNING]\n"
    "> This pull request was opened from a non-production environment. Do not merge it.\n"
)


def generate_pr_body(summary: str, sections: Sequence[tuple[str, Sequence[str]]], notes: str = "") -> str:
    """Return a formatted pull request body.

    The body starts with a Summary section followed by one section per
    ``(heading, lines)`` pair in ``sections``.  Each line is rendered as a
    bullet.  An empty section renders ``None``.  ``notes`` is appended under
    a Notes heading when provided.
    """
    body_parts: list[str] = []
    body_parts.append("### Summary\n")
    body_parts.append(summary.strip() + "\n")
    for heading, lines in sections:
        body_parts.append(f"\n### {heading}\n")
        if lines:
            for line in lines:
                body_parts.append(f"- {line}\n")
        else:
            body_parts.append("None\n")
    if notes.strip():
        body_parts.append("\n### Notes\n")
        body_parts.append(notes.strip() + "\n")
    return "".join(body_parts)


def _format_coordinate(location: Location) -> str:
    return f"{location.name} ({location.latitude}, {location.longitude})"


def _format_test(test: Test) -> list[str]:
    lines = [f"**{test.name}**"]
    if test.description:
        lines.append(f"{test.name}: {test.description}")
    for ordinal, step in enumerate(test.steps, start=1):
        lines.append(f"{test.name} step {ordinal}: {step.name} (requirement: {step.requirement})")
    return lines


def add_tests_body(tests: Sequence[Test]) -> str:
    steps = [line for test in tests for line in _format_test(test)]
    return generate_pr_body(
        summary=f"Adds {len(tests)} acceptance test(s) generated from their plain-text definitions.",
        sections=[("Tests", [t.name for t in tests]), ("Steps", steps)],
        notes="Generated test files should not be edited by hand; resubmit the test instead.",
    )


def add_locations_body(locations: Sequence[Location]) -> str:
    return generate_pr_body(
        summary=f"Adds or updates {len(locations)} location(s).",
        sections=[("Locations", [_format_coordinate(loc) for loc in locations])],
    )


def remove_tests_body(test_names: Sequence[str]) -> str:
    return generate_pr_body(
        summary=f"Removes {len(test_names)} acceptance test(s) and their generated files.",
        sections=[("Removed Tests", list(test_names))],
    )
