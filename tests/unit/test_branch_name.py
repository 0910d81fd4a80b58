"""Unit tests for branch naming."""

import pytest

from branch_stager.git.branch_name import BranchKind, BranchName, kind_of, new_branch


def test_new_branch_encodes_kind_and_label():
    branch = new_branch(BranchKind.ADD_LOCATIONS, "Downtown Park!")

    assert branch.kind is BranchKind.ADD_LOCATIONS
    assert branch.raw.startswith("add-locations/downtown-park-")
    assert len(branch.suffix) == 10
    assert str(branch) == branch.raw


def test_new_branch_names_are_unique_for_identical_labels():
    names = {new_branch(BranchKind.ADD_TESTS, "same").raw for _ in range(1000)}
    assert len(names) == 1000


def test_new_branch_falls_back_to_default_label():
    branch = new_branch(BranchKind.REMOVE_TESTS, "!!!")
    assert branch.raw.startswith("remove-tests/change-")


def test_new_branch_rejects_unknown_kind():
    with pytest.raises(ValueError):
        new_branch(BranchKind.UNKNOWN, "anything")


@pytest.mark.parametrize("kind", [BranchKind.ADD_TESTS, BranchKind.ADD_LOCATIONS, BranchKind.REMOVE_TESTS])
def test_parse_round_trips_created_names(kind):
    branch = new_branch(kind, "A label")
    parsed = BranchName.parse(branch.raw)

    assert parsed == branch
    assert kind_of(branch.raw) is kind
    assert kind_of(branch) is kind


def test_parse_unknown_prefix_keeps_raw_string():
    parsed = BranchName.parse("feature/something")

    assert parsed.kind is BranchKind.UNKNOWN
    assert str(parsed) == "feature/something"
    assert kind_of("feature/something") is None


def test_kind_of_requires_a_label_after_the_prefix():
    assert kind_of("add-tests/") is None
    assert kind_of("add-tests") is None
