"""SQLite connection lifecycle and schema for the staged-entity store.

Every read and write goes through ``StagingStore.transaction()``: a context
manager that serializes access to the one connection, opens an immediate
transaction, commits when the block succeeds and rolls back when it raises.
Keep these blocks short and free of network calls; in particular never open
one while waiting on git or GitHub.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..constants import SQLITE_BUSY_TIMEOUT_S
from ..models.test import name_key

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

# A logical key may have one canonical row (unmerged_branch_name IS NULL) and
# any number of staged rows, at most one per branch.  Locations are keyed by
# their case-insensitive name, tests by ``name_key(name)`` stored in ``key``.
_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS Locations (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL COLLATE NOCASE,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    unmerged_branch_name TEXT,
    UNIQUE (name, unmerged_branch_name)
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_locations_canonical_name
    ON Locations (name) WHERE unmerged_branch_name IS NULL;
CREATE INDEX IF NOT EXISTS idx_locations_branch ON Locations (unmerged_branch_name);

CREATE TABLE IF NOT EXISTS Tests (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    key TEXT NOT NULL,
    description TEXT,
    unmerged_branch_name TEXT
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_tests_key_branch ON Tests (key, unmerged_branch_name);
CREATE UNIQUE INDEX IF NOT EXISTS idx_tests_canonical_key
    ON Tests (key) WHERE unmerged_branch_name IS NULL;
CREATE INDEX IF NOT EXISTS idx_tests_branch ON Tests (unmerged_branch_name);

CREATE TABLE IF NOT EXISTS TestSteps (
    id INTEGER PRIMARY KEY,
    test_id INTEGER NOT NULL REFERENCES Tests (id) ON DELETE CASCADE,
    content TEXT NOT NULL,
    ordinal INTEGER NOT NULL,
    UNIQUE (test_id, ordinal)
);

CREATE TABLE IF NOT EXISTS StagedTestRemovals (
    name TEXT NOT NULL,
    key TEXT NOT NULL,
    unmerged_branch_name TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_test_removals_key_branch
    ON StagedTestRemovals (key, unmerged_branch_name);
"""

# Version 1 keyed tests by case-insensitive name.  Rows that collapse onto the
# same key keep the most recently inserted one.
_MIGRATE_V1_SQL = """
ALTER TABLE Tests ADD COLUMN key TEXT NOT NULL DEFAULT '';
UPDATE Tests SET key = name_key(name);
DELETE FROM Tests WHERE id NOT IN (
    SELECT MAX(id) FROM Tests GROUP BY key, IFNULL(unmerged_branch_name, '')
);
DROP INDEX IF EXISTS idx_tests_canonical_name;
ALTER TABLE StagedTestRemovals ADD COLUMN key TEXT NOT NULL DEFAULT '';
UPDATE StagedTestRemovals SET key = name_key(name);
DELETE FROM StagedTestRemovals WHERE rowid NOT IN (
    SELECT MAX(rowid) FROM StagedTestRemovals GROUP BY key, unmerged_branch_name
);
"""


def _execute_script(conn: sqlite3.Connection, script: str) -> None:
    # executescript() would commit the open transaction
    for statement in script.split(";"):
        if statement.strip():
            conn.execute(statement)


class StagingStore:
    """Owns the SQLite connection backing the staged-entity cache."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def open(cls, path: str | Path) -> StagingStore:
        """Open (creating if needed) the database file at ``path``."""
        db_path = Path(path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls._connect(str(db_path))

    @classmethod
    def in_memory(cls) -> StagingStore:
        return cls._connect(":memory:")

    @classmethod
    def _connect(cls, database: str) -> StagingStore:
        connection = sqlite3.connect(
            database,
            timeout=SQLITE_BUSY_TIMEOUT_S,
            isolation_level=None,
            check_same_thread=False,
        )
        connection.row_factory = sqlite3.Row
        connection.create_function("name_key", 1, name_key, deterministic=True)
        connection.execute("PRAGMA foreign_keys = ON")
        store = cls(connection)
        store._migrate()
        return store

    def _migrate(self) -> None:
        version = self._connection.execute("PRAGMA user_version").fetchone()[0]
        if version > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {version} is newer than supported {SCHEMA_VERSION}")
        with self.transaction() as conn:
            if version == 1:
                logger.info("Migrating staging store schema from version 1")
                _execute_script(conn, _MIGRATE_V1_SQL)
            _execute_script(conn, _SCHEMA_SQL)
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        logger.debug("Staging store schema at version %d", SCHEMA_VERSION)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block in one database transaction.

        Not reentrant: do not open a transaction inside another one.  When
        either the block or the final ``COMMIT`` fails, the transaction is
        rolled back so the connection can start the next one.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Staging store is closed")
            conn = self._connection
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._closed = True
                self._connection.close()
