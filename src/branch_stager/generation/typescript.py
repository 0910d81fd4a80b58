"""TypeScript writer for the locations module and per-test files.

Each test directory gets a ``TestCase.test.ts`` runner and a
``TestActions.ts`` module with one stub per distinct step.  Steps that carry a
``location_name`` become location changes that index ``TestLocations`` by the
lowercased location name, the same key the store uses.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from ..git.metadata import RepositoryMetadata
from ..models.location import Location
from ..models.test import Test, TestStep

logger = logging.getLogger(__name__)

GENERATED_HEADER = "// Generated by branch-stager. Do not edit by hand.\n\n"
TEST_CASE_FILENAME = "TestCase.test.ts"
TEST_ACTIONS_FILENAME = "TestActions.ts"

_WORD = re.compile(r"[A-Za-z0-9]+")

_LAUNCH_IMPORT = 'import { TestAppLaunchConfig } from "../Launch"\n'
_LOCATION_IMPORT = 'import { TestLocations, setUserLocation } from "../Location"\n'
_BEFORE_LAUNCH = """\
export const beforeLaunch = async (): Promise<TestAppLaunchConfig> => {
  // Perform any setup work in here, (setting location, reseting device
  // permissions, etc.)
  return {}
}
"""
_TEST_CASE_IMPORTS = """\
import * as TestActions from "./TestActions"
import { launchApp } from "../Launch"
import { AcceptanceTestCase } from "../TestCase"
import { acceptanceClient } from "../Client"

"""


def to_pascal_case(text: str) -> str:
    return "".join(word[:1].upper() + word[1:] for word in _WORD.findall(text))


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def _location_key(location_name: str) -> str:
    return location_name.strip().lower()


def _location_ref(location_name: str) -> str:
    return f"TestLocations[{json.dumps(_location_key(location_name))}]"


def _action_signature(step: TestStep) -> tuple[str, str]:
    # Steps with the same signature share one stub.
    if step.location_name is not None:
        return "location", _location_key(step.location_name)
    return "step", to_camel_case(step.requirement) or to_camel_case(step.name)


def _base_action_name(step: TestStep) -> str:
    if step.location_name is not None:
        name = f"setLocationTo{to_pascal_case(step.location_name)}"
    else:
        name = _action_signature(step)[1]
    if not name or name[0].isdigit():
        name = f"step{name[:1].upper()}{name[1:]}"
    return name


def action_names(test: Test) -> list[str]:
    """TypeScript identifier of each step's action, in step order.

    Different actions that would render to the same identifier get a numeric
    suffix so every export in ``TestActions.ts`` stays unique.
    """
    by_signature: dict[tuple[str, str], str] = {}
    taken: set[str] = set()
    names = []
    for step in test.steps:
        signature = _action_signature(step)
        name = by_signature.get(signature)
        if name is None:
            base = name = _base_action_name(step)
            suffix = 2
            while name in taken:
                name = f"{base}{suffix}"
                suffix += 1
            taken.add(name)
            by_signature[signature] = name
        names.append(name)
    return names


def _action_code(step: TestStep, name: str) -> str:
    if step.location_name is not None:
        return (
            f"export const {name} = async () => {{\n"
            f"  await setUserLocation({_location_ref(step.location_name)})\n"
            "}\n"
        )
    return (
        f"export const {name} = async () => {{\n"
        f"  // {step.name}\n"
        '  throw new Error("TODO")\n'
        "}\n"
    )


def actions_typescript(test: Test) -> str:
    ts = _LAUNCH_IMPORT
    if any(step.location_name is not None for step in test.steps):
        ts += _LOCATION_IMPORT
    ts += "\n" + _BEFORE_LAUNCH
    seen: set[str] = set()
    for step, name in zip(test.steps, action_names(test)):
        if name not in seen:
            seen.add(name)
            ts += "\n" + _action_code(step, name)
    return ts


def runner_typescript(test: Test) -> str:
    name = json.dumps(test.name)
    ts = GENERATED_HEADER + _TEST_CASE_IMPORTS
    ts += f"test({name}, async () => {{\n"
    ts += f"  const testCase = new AcceptanceTestCase({name}, TestActions.beforeLaunch)\n"
    for step, action in zip(test.steps, action_names(test)):
        comment = f"Set Location to {step.location_name}" if step.location_name is not None else step.name
        ts += f"  // {comment}\n"
        ts += f"  testCase.appendAction(TestActions.{action})\n"
    ts += "  await acceptanceClient.run(testCase)\n"
    ts += "})\n"
    return ts


def locations_typescript(locations: Iterable[Location]) -> str:
    """The ``TestLocations`` module, keyed by lowercased location name."""
    ts = GENERATED_HEADER + "export const TestLocations = {\n"
    for location in sorted(locations, key=lambda loc: loc.key):
        ts += (
            f"  {json.dumps(location.key)}: "
            f"{{ latitude: {location.latitude!r}, longitude: {location.longitude!r} }},\n"
        )
    ts += "}\n"
    return ts


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s", path)


def write_locations(metadata: RepositoryMetadata, locations: Iterable[Location]) -> Path:
    path = metadata.locations_path()
    _write(path, locations_typescript(locations))
    return path


def write_test(metadata: RepositoryMetadata, test: Test) -> Path:
    """Write the files for ``test`` into its directory and return that directory."""
    dirpath = metadata.test_dirpath(test.name)
    _write(dirpath / TEST_CASE_FILENAME, runner_typescript(test))
    _write(dirpath / TEST_ACTIONS_FILENAME, actions_typescript(test))
    return dirpath
