"""
SQLite database initialization and connection management.

Single responsibility: own the connection and create tables.
All actual queries live in Repository.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "lifeplanner.db"

SCHEMA_SQL = """
-- Goals ---------------------------------------------------------------------
CREATE TABLE IF NOT EXISTS goals (
    id              TEXT    PRIMARY KEY,
    title           TEXT    NOT NULL,
    category        TEXT    NOT NULL DEFAULT '',
    target_value    REAL    NOT NULL DEFAULT 0,
    current_value   REAL    NOT NULL DEFAULT 0,
    created_at      TEXT    NOT NULL DEFAULT (datetime('now'))
);

-- Tasks ---------------------------------------------------------------------
CREATE TABLE IF NOT EXISTS tasks (
    id                  TEXT    PRIMARY KEY,
    goal_id             TEXT    REFERENCES goals(id),
    title               TEXT    NOT NULL,
    description         TEXT    NOT NULL DEFAULT '',
    day_index           INTEGER NOT NULL DEFAULT 0,
    scheduled_date      TEXT,
    start_time          TEXT    NOT NULL,
    estimated_minutes   INTEGER NOT NULL DEFAULT 30,
    actual_minutes      INTEGER,
    status              TEXT    NOT NULL DEFAULT 'pending',
    difficulty          TEXT    NOT NULL DEFAULT 'medium',
    completed_at        TEXT,
    notes               TEXT
);

-- Fitness snapshots (one per day) --------------------------------------------
CREATE TABLE IF NOT EXISTS fitness_data (
    date            TEXT    PRIMARY KEY,
    steps           INTEGER NOT NULL DEFAULT 0,
    steps_goal      INTEGER NOT NULL DEFAULT 10000,
    distance_km     REAL    NOT NULL DEFAULT 0,
    active_minutes  INTEGER NOT NULL DEFAULT 0,
    calories_burned INTEGER NOT NULL DEFAULT 0
);

-- Behavior patterns (append-only history) ------------------------------------
CREATE TABLE IF NOT EXISTS behavior_patterns (
    row_id          INTEGER PRIMARY KEY AUTOINCREMENT,
    id              TEXT    NOT NULL,
    type            TEXT    NOT NULL,
    title           TEXT    NOT NULL,
    description     TEXT    NOT NULL,
    insight         TEXT    NOT NULL,
    confidence      REAL    NOT NULL,
    detected_at     TEXT    NOT NULL,
    data_points     INTEGER NOT NULL,
    period          TEXT
);

-- Daily insights (append-only history) ---------------------------------------
CREATE TABLE IF NOT EXISTS daily_insights (
    row_id          INTEGER PRIMARY KEY AUTOINCREMENT,
    date            TEXT    NOT NULL,
    tasks_completed INTEGER NOT NULL,
    tasks_total     INTEGER NOT NULL,
    completion_rate REAL    NOT NULL,
    focus_minutes   INTEGER NOT NULL,
    streak_days     INTEGER NOT NULL,
    mood            TEXT    NOT NULL,
    energy_level    TEXT    NOT NULL
);

-- Agent actions (audit log) --------------------------------------------------
CREATE TABLE IF NOT EXISTS agent_actions (
    row_id          INTEGER PRIMARY KEY AUTOINCREMENT,
    id              TEXT    NOT NULL,
    type            TEXT    NOT NULL,
    timestamp       TEXT    NOT NULL,
    input           TEXT    NOT NULL,
    output          TEXT    NOT NULL,
    status          TEXT    NOT NULL,
    duration        INTEGER NOT NULL DEFAULT 0
);

-- Indexes for common queries -------------------------------------------------
CREATE INDEX IF NOT EXISTS idx_tasks_goal        ON tasks(goal_id);
CREATE INDEX IF NOT EXISTS idx_tasks_day         ON tasks(day_index);
CREATE INDEX IF NOT EXISTS idx_insights_date     ON daily_insights(date);
CREATE INDEX IF NOT EXISTS idx_patterns_type     ON behavior_patterns(type);
"""


SCHEMA_VERSION = 1
IN_MEMORY = ":memory:"


class Database:
    """
    Owns the planner's SQLite connection.

    On first connect the schema is created and stamped with SCHEMA_VERSION
    through ``PRAGMA user_version``. A file written by a newer build is
    refused instead of being silently downgraded.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = str(db_path or DEFAULT_DB_PATH)
        self.conn: Optional[sqlite3.Connection] = None

    @classmethod
    def in_memory(cls) -> "Database":
        """A connected throwaway database (tests, dry runs)."""
        db = cls(db_path=IN_MEMORY)
        db.connect()
        return db

    @property
    def is_memory(self) -> bool:
        return self.db_path == IN_MEMORY

    def connect(self) -> sqlite3.Connection:
        if self.conn is None:
            logger.info("Opening planner database %s", self.db_path)
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            if not self.is_memory:
                conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            self.conn = conn
            self._migrate()
        return self.conn

    def close(self) -> None:
        if self.conn is None:
            return
        self.conn.close()
        self.conn = None
        logger.info("Closed planner database %s", self.db_path)

    def __enter__(self) -> sqlite3.Connection:
        return self.connect()

    def __exit__(self, *exc) -> None:
        self.close()

    def schema_version(self) -> int:
        assert self.conn is not None
        return self.conn.execute("PRAGMA user_version").fetchone()[0]

    # -- internal ------------------------------------------------------------

    def _migrate(self) -> None:
        found = self.schema_version()
        if found > SCHEMA_VERSION:
            self.close()
            raise sqlite3.DatabaseError(
                f"Database schema v{found} is newer than this build (v{SCHEMA_VERSION})"
            )
        self.conn.executescript(SCHEMA_SQL)
        if found < SCHEMA_VERSION:
            # PRAGMA does not take bound parameters.
            self.conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            logger.info("Schema upgraded v%d -> v%d", found, SCHEMA_VERSION)
        self.conn.commit()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Holds the planner schema (goals, tasks, fitness snapshots and the three
#   append-only history tables) and the one object that opens the file.
#
# Key pieces:
#   - History tables use a surrogate row_id so re-running an analysis adds
#     rows instead of replacing them.
#   - user_version tracks the schema revision; a newer file is rejected.
#   - Database.in_memory() gives tests a ready connection in one call.
#
# Data flow:
#   CLI group callback → Database.connect() → Repository(conn) → services
