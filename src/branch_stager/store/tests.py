"""Staged and canonical tests, and staged test removals.

Rows are matched on ``key`` (see ``models.test.name_key``), so spellings of a
name that share a directory also share their rows.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable

from ..git.branch_name import BranchName
from ..models.staged import Staged
from ..models.test import SearchTestsQuery, Test, TestStep, name_key


def _branch_or_none(raw: str | None) -> BranchName | None:
    return BranchName.parse(raw) if raw else None


def save_tests(conn: sqlite3.Connection, tests: Iterable[Test], branch: BranchName) -> None:
    """Stage ``tests`` on ``branch``.

    A test already staged on the same branch under the same key is replaced
    along with its steps.  When one call contains the same key twice, the
    last occurrence wins.
    """
    by_key: dict[str, Test] = {}
    for test in tests:
        by_key.pop(test.key, None)
        by_key[test.key] = test

    for key, test in by_key.items():
        conn.execute(
            "DELETE FROM Tests WHERE key = ? AND unmerged_branch_name = ?",
            (key, str(branch)),
        )
        cursor = conn.execute(
            "INSERT INTO Tests (name, key, description, unmerged_branch_name) VALUES (?, ?, ?, ?)",
            (test.name, key, test.description, str(branch)),
        )
        conn.executemany(
            "INSERT INTO TestSteps (test_id, content, ordinal) VALUES (?, ?, ?)",
            [(cursor.lastrowid, step.to_json(), ordinal) for ordinal, step in enumerate(test.steps)],
        )


def merge_tests(conn: sqlite3.Connection, branch: BranchName) -> None:
    """Promote the tests staged on ``branch``, replacing canonical tests with the same key."""
    conn.execute(
        """
        DELETE FROM Tests
        WHERE unmerged_branch_name IS NULL
          AND key IN (SELECT key FROM Tests WHERE unmerged_branch_name = ?)
        """,
        (str(branch),),
    )
    conn.execute(
        "UPDATE Tests SET unmerged_branch_name = NULL WHERE unmerged_branch_name = ?",
        (str(branch),),
    )


def close_tests(conn: sqlite3.Connection, branch: BranchName) -> None:
    conn.execute("DELETE FROM Tests WHERE unmerged_branch_name = ?", (str(branch),))


def tests_in_alphabetical_order(conn: sqlite3.Connection, query: SearchTestsQuery) -> list[Staged[Test]]:
    """Tests matching ``query`` ordered by key, canonical row first for each key."""
    clauses: list[str] = []
    params: list[str] = []
    if not query.is_all_tests:
        clauses.append(f"t.key IN ({', '.join('?' for _ in query.keys)})")
        params.extend(query.keys)
    if query.merged_only:
        clauses.append("t.unmerged_branch_name IS NULL")
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    rows = conn.execute(
        f"""
        SELECT t.id, t.name, t.description, t.unmerged_branch_name, s.content
        FROM Tests t
        LEFT JOIN TestSteps s ON s.test_id = t.id
        {where}
        ORDER BY t.key, t.unmerged_branch_name IS NOT NULL, t.unmerged_branch_name, s.ordinal
        """,
        params,
    ).fetchall()

    results: list[Staged[Test]] = []
    current_id: int | None = None
    steps: list[TestStep] = []
    header: sqlite3.Row | None = None

    def flush() -> None:
        if header is not None:
            test = Test(header["name"], header["description"], tuple(steps))
            results.append(Staged(test, _branch_or_none(header["unmerged_branch_name"])))

    for row in rows:
        if row["id"] != current_id:
            flush()
            current_id = row["id"]
            header = row
            steps = []
        if row["content"] is not None:
            steps.append(TestStep.from_json(row["content"]))
    flush()
    return results


def stage_test_removals(conn: sqlite3.Connection, test_names: Iterable[str], branch: BranchName) -> None:
    conn.executemany(
        "INSERT OR IGNORE INTO StagedTestRemovals (name, key, unmerged_branch_name) VALUES (?, ?, ?)",
        [(name, name_key(name), str(branch)) for name in test_names],
    )


def merge_test_removals(conn: sqlite3.Connection, branch: BranchName) -> None:
    """Delete the canonical tests keyed by ``branch``'s removals, then the removals."""
    conn.execute(
        """
        DELETE FROM Tests
        WHERE unmerged_branch_name IS NULL
          AND key IN (SELECT key FROM StagedTestRemovals WHERE unmerged_branch_name = ?)
        """,
        (str(branch),),
    )
    close_test_removals(conn, branch)


def close_test_removals(conn: sqlite3.Connection, branch: BranchName) -> None:
    conn.execute("DELETE FROM StagedTestRemovals WHERE unmerged_branch_name = ?", (str(branch),))


def staged_test_removals(conn: sqlite3.Connection) -> list[Staged[str]]:
    rows = conn.execute(
        "SELECT name, unmerged_branch_name FROM StagedTestRemovals ORDER BY key, unmerged_branch_name"
    ).fetchall()
    return [Staged(row["name"], BranchName.parse(row["unmerged_branch_name"])) for row in rows]
