"""Unit tests for the operations, driven through the recording repository client."""

from branch_stager.git.branch_name import BranchKind
from branch_stager.git.edit import FailedToOpenPullRequest, MergeConflict
from branch_stager.models.location import Location, LocationErrorCode
from branch_stager.models.staged import Staged
from branch_stager.models.test import Test, TestStep
from branch_stager.operations import (
    AddLocationsSuccess,
    AddTestsSuccess,
    Closed,
    Merged,
    NoLocationsAdded,
    NoTestsAdded,
    NoTestsRemoved,
    RemoveTestsSuccess,
    UnknownBranchKind,
    add_locations,
    add_tests,
    close_branch,
    load_locations,
    merge_branch,
    remove_tests,
    search_tests,
)
from branch_stager.store.locations import LocationsFilter
from branch_stager.store.tests import staged_test_removals


def _test(name, requirement="Do it"):
    return Test(name, None, (TestStep("Step", requirement),))


class TestAddLocations:
    def test_success_then_merge_yields_one_canonical_location(self, noop_repository, store, gateway):
        outcome = add_locations("Test, 50.0, 50.0", noop_repository, store, gateway)

        assert isinstance(outcome, AddLocationsSuccess)
        assert outcome.branch_deleted_locally is True
        assert outcome.branch.kind is BranchKind.ADD_LOCATIONS
        assert outcome.locations == (Location("Test", 50.0, 50.0),)
        assert load_locations(store) == [Staged(Location("Test", 50.0, 50.0), outcome.branch)]

        assert merge_branch(str(outcome.branch), store) == Merged(BranchKind.ADD_LOCATIONS)
        assert load_locations(store, LocationsFilter.MERGED_ONLY) == [Staged(Location("Test", 50.0, 50.0))]

    def test_invalid_lines_are_reported_alongside_success(self, noop_repository, store, gateway):
        outcome = add_locations("Test, 50.0, 50.0\n29879", noop_repository, store, gateway)

        assert isinstance(outcome, AddLocationsSuccess)
        assert [e.code for e in outcome.errors] == [LocationErrorCode.INVALID_NAME]

    def test_empty_input_touches_nothing(self, noop_repository, noop_client, store, gateway):
        assert add_locations("", noop_repository, store, gateway) == NoLocationsAdded()
        assert noop_client.calls == []
        assert gateway.opened == []

    def test_only_invalid_lines_is_no_locations_added(self, noop_repository, store, gateway):
        outcome = add_locations("29879", noop_repository, store, gateway)
        assert isinstance(outcome, NoLocationsAdded)
        assert len(outcome.errors) == 1

    def test_written_module_includes_canonical_locations(self, noop_repository, noop_client, store, gateway):
        first = add_locations("Airport, 1.0, 1.0", noop_repository, store, gateway)
        merge_branch(str(first.branch), store)
        add_locations("Zoo, 2.0, 2.0", noop_repository, store, gateway)

        content = noop_client.metadata.locations_path().read_text(encoding="utf-8")
        assert '"airport":' in content
        assert '"zoo":' in content

    def test_merge_conflict_stages_nothing(self, noop_repository, noop_client, store, gateway):
        noop_client.should_merge_conflict = True

        assert add_locations("Test, 1.0, 1.0", noop_repository, store, gateway) == MergeConflict()
        assert load_locations(store) == []
        assert gateway.opened == []

    def test_rejected_pull_request_stages_nothing(self, noop_repository, store, gateway):
        gateway.should_fail = True

        assert add_locations("Test, 1.0, 1.0", noop_repository, store, gateway) == FailedToOpenPullRequest()
        assert load_locations(store) == []


class TestAddTests:
    def test_success_writes_files_and_stages_tests(self, noop_repository, noop_client, store, gateway):
        outcome = add_tests([_test("Login")], noop_repository, store, gateway)

        assert isinstance(outcome, AddTestsSuccess)
        assert noop_client.metadata.test_dirpath("Login").is_dir()
        assert [s.unmerged_branch for s in search_tests(store, "")] == [outcome.branch]
        assert gateway.opened[0].title == "Add Tests Login"

    def test_empty_input_is_no_tests_added(self, noop_repository, noop_client, store, gateway):
        assert add_tests([], noop_repository, store, gateway) == NoTestsAdded()
        assert noop_client.calls == []

    def test_same_test_on_two_branches_merges_second(self, noop_repository, store, gateway):
        first = add_tests([_test("Test", "First")], noop_repository, store, gateway)
        second = add_tests([_test("Test", "Second")], noop_repository, store, gateway)

        merge_branch(str(second.branch), store)

        canonical = search_tests(store, "Test", merged_only=True)
        assert [s.value for s in canonical] == [_test("Test", "Second")]
        staged = [s for s in search_tests(store, "test") if not s.is_canonical]
        assert [s.unmerged_branch for s in staged] == [first.branch]

    def test_close_discards_staged_tests(self, noop_repository, store, gateway):
        outcome = add_tests([_test("Login")], noop_repository, store, gateway)

        assert close_branch(str(outcome.branch), store) == Closed(BranchKind.ADD_TESTS)
        assert close_branch(str(outcome.branch), store) == Closed(BranchKind.ADD_TESTS)
        assert search_tests(store, "") == []

    def test_spellings_sharing_a_directory_are_one_test(self, noop_repository, noop_client, store, gateway):
        outcome = add_tests([_test("Log In", "First"), _test("log-in", "Second")], noop_repository, store, gateway)

        assert isinstance(outcome, AddTestsSuccess)
        assert [s.value for s in search_tests(store, "")] == [_test("log-in", "Second")]
        test_cases = noop_client.metadata.root / "acceptance"
        assert [p.name for p in test_cases.iterdir()] == ["log-in"]

    def test_search_matches_on_directory_name(self, noop_repository, store, gateway):
        add_tests([_test("Log In")], noop_repository, store, gateway)

        assert [s.value.name for s in search_tests(store, "log-in")] == ["Log In"]
        assert [s.value.name for s in search_tests(store, "LOG  IN!")] == ["Log In"]


class TestRemoveTests:
    def test_removes_existing_tests_and_stages_removals(self, noop_repository, noop_client, store, gateway):
        added = add_tests([_test("Login"), _test("Logout")], noop_repository, store, gateway)
        merge_branch(str(added.branch), store)

        outcome = remove_tests("login\nMissing", noop_repository, store, gateway)

        assert isinstance(outcome, RemoveTestsSuccess)
        assert outcome.removed_test_names == ("login",)
        assert not noop_client.metadata.test_dirpath("Login").exists()

        merge_branch(str(outcome.branch), store)
        assert [s.value.name for s in search_tests(store, "")] == ["Logout"]

    def test_blank_names_is_no_tests_removed(self, noop_repository, noop_client, store, gateway):
        assert remove_tests("\n  \n", noop_repository, store, gateway) == NoTestsRemoved()
        assert noop_client.calls == []

    def test_nothing_to_remove_abandons_branch(self, noop_repository, noop_client, store, gateway):
        assert remove_tests("Missing", noop_repository, store, gateway) == NoTestsRemoved()
        assert "push_changes" not in noop_client.call_names()
        assert "delete_local_branch" in noop_client.call_names()
        assert gateway.opened == []

    def test_removal_by_directory_spelling_removes_canonical_test(
        self, noop_repository, noop_client, store, gateway
    ):
        added = add_tests([_test("Log In")], noop_repository, store, gateway)
        merge_branch(str(added.branch), store)

        outcome = remove_tests("log-in", noop_repository, store, gateway)

        assert isinstance(outcome, RemoveTestsSuccess)
        assert not noop_client.metadata.test_dirpath("Log In").exists()
        merge_branch(str(outcome.branch), store)
        assert search_tests(store, "") == []

    def test_names_without_letters_or_digits_remove_nothing(self, noop_repository, noop_client, store, gateway):
        add_tests([_test("Login")], noop_repository, store, gateway)
        test_cases = noop_client.metadata.root / "acceptance"
        (test_cases / "README.md").write_text("keep me\n", encoding="utf-8")
        noop_client.calls.clear()

        assert remove_tests("!!!\n---\n", noop_repository, store, gateway) == NoTestsRemoved()

        assert noop_client.calls == []
        assert (test_cases / "login").is_dir()
        assert (test_cases / "README.md").is_file()

    def test_only_matching_names_are_staged_for_removal(self, noop_repository, store, gateway):
        add_tests([_test("Login")], noop_repository, store, gateway)

        outcome = remove_tests("Login\nMissing", noop_repository, store, gateway)

        with store.transaction() as conn:
            staged = staged_test_removals(conn)
        assert [(s.value, s.unmerged_branch) for s in staged] == [("Login", outcome.branch)]


class TestBranchSignals:
    def test_unknown_branch_kind(self, store):
        assert merge_branch("feature/x", store) == UnknownBranchKind("feature/x")
        assert close_branch("feature/x", store) == UnknownBranchKind("feature/x")

    def test_merge_is_scoped_to_one_branch(self, noop_repository, store, gateway):
        first = add_locations("Park, 1.0, 1.0", noop_repository, store, gateway)
        add_locations("Zoo, 2.0, 2.0", noop_repository, store, gateway)

        merge_branch(str(first.branch), store)

        assert [(s.value.name, s.is_canonical) for s in load_locations(store)] == [
            ("Park", True),
            ("Zoo", False),
        ]
