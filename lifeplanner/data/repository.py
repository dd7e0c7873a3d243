"""
Repository — the single place where SQL lives.

Every other module talks to Repository, never to raw SQL. The analysis
engine only needs the handful of read and append methods below, so tests can
run against an in-memory database or a stub with the same methods.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from .models import (
    AgentAction, BehaviorPattern, DailyInsight, FitnessData, Goal, Task,
)

logger = logging.getLogger(__name__)

# helper: parse ISO datetime strings from SQLite
_parse_dt = lambda s: datetime.fromisoformat(s) if s else None
_fmt_dt = lambda d: d.isoformat() if d else None

# columns Goal accepts through update_goal()
_GOAL_PATCHABLE = ("title", "category", "target_value", "current_value")


class Repository:
    """Data-access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # ── Goals ───────────────────────────────────────────────────────────────

    def add_goal(self, goal: Goal) -> Goal:
        if goal.created_at is None:
            goal.created_at = datetime.now()
        self.conn.execute(
            "INSERT INTO goals (id, title, category, target_value, current_value, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (goal.id, goal.title, goal.category, goal.target_value,
             goal.current_value, _fmt_dt(goal.created_at)),
        )
        self.conn.commit()
        return goal

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        row = self.conn.execute(
            "SELECT * FROM goals WHERE id = ?", (goal_id,)
        ).fetchone()
        return self._row_to_goal(row) if row else None

    def get_goals(self) -> List[Goal]:
        rows = self.conn.execute(
            "SELECT * FROM goals ORDER BY created_at, id"
        ).fetchall()
        return [self._row_to_goal(r) for r in rows]

    def update_goal(self, goal_id: str, fields: dict) -> Optional[Goal]:
        """Merge-patch: only the given fields change. Returns the new goal."""
        patch = {k: v for k, v in fields.items() if k in _GOAL_PATCHABLE}
        ignored = set(fields) - set(patch)
        if ignored:
            logger.warning("update_goal ignoring fields: %s", ", ".join(sorted(ignored)))
        if patch:
            assignments = ", ".join(f"{k} = ?" for k in patch)
            self.conn.execute(
                f"UPDATE goals SET {assignments} WHERE id = ?",
                (*patch.values(), goal_id),
            )
            self.conn.commit()
        return self.get_goal(goal_id)

    # ── Tasks ───────────────────────────────────────────────────────────────

    def add_task(self, task: Task) -> Task:
        self.conn.execute(
            """INSERT INTO tasks (
                id, goal_id, title, description, day_index, scheduled_date,
                start_time, estimated_minutes, actual_minutes, status,
                difficulty, completed_at, notes
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            self._task_params(task),
        )
        self.conn.commit()
        return task

    def save_task(self, task: Task) -> None:
        """Overwrite every mutable column of an existing task."""
        params = self._task_params(task)
        self.conn.execute(
            """UPDATE tasks SET
                goal_id = ?, title = ?, description = ?, day_index = ?,
                scheduled_date = ?, start_time = ?, estimated_minutes = ?,
                actual_minutes = ?, status = ?, difficulty = ?,
                completed_at = ?, notes = ?
            WHERE id = ?""",
            (*params[1:], params[0]),
        )
        self.conn.commit()

    def get_task(self, task_id: str) -> Optional[Task]:
        row = self.conn.execute(
            "SELECT * FROM tasks WHERE id = ?", (task_id,)
        ).fetchone()
        return self._row_to_task(row) if row else None

    def get_tasks(self, day_index: Optional[int] = None) -> List[Task]:
        if day_index is not None:
            rows = self.conn.execute(
                "SELECT * FROM tasks WHERE day_index = ? ORDER BY start_time, id",
                (day_index,),
            ).fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM tasks ORDER BY day_index, start_time, id"
            ).fetchall()
        return [self._row_to_task(r) for r in rows]

    def count_done_tasks(self, goal_id: str) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM tasks WHERE goal_id = ? AND status = 'done'",
            (goal_id,),
        ).fetchone()
        return row[0]

    # ── Fitness ─────────────────────────────────────────────────────────────

    def record_fitness(self, data: FitnessData) -> FitnessData:
        """Store a day's snapshot. Re-recording a date replaces it."""
        self.conn.execute(
            "INSERT OR REPLACE INTO fitness_data "
            "(date, steps, steps_goal, distance_km, active_minutes, calories_burned) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (data.date, data.steps, data.steps_goal, data.distance_km,
             data.active_minutes, data.calories_burned),
        )
        self.conn.commit()
        return data

    def get_fitness(self, day: str) -> Optional[FitnessData]:
        row = self.conn.execute(
            "SELECT * FROM fitness_data WHERE date = ?", (day,)
        ).fetchone()
        return self._row_to_fitness(row) if row else None

    def list_fitness_history(self, days: int = 7) -> List[FitnessData]:
        """Most recent `days` snapshots, oldest first."""
        rows = self.conn.execute(
            "SELECT * FROM fitness_data ORDER BY date DESC LIMIT ?", (days,)
        ).fetchall()
        return [self._row_to_fitness(r) for r in reversed(rows)]

    # ── Analysis history (append-only) ──────────────────────────────────────

    def append_behavior_pattern(self, pattern: BehaviorPattern) -> None:
        self.conn.execute(
            "INSERT INTO behavior_patterns "
            "(id, type, title, description, insight, confidence, detected_at, data_points, period) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (pattern.id, pattern.type, pattern.title, pattern.description,
             pattern.insight, pattern.confidence, _fmt_dt(pattern.detected_at),
             pattern.data_points, pattern.period),
        )
        self.conn.commit()

    def list_behavior_patterns(self, limit: int = 100) -> List[BehaviorPattern]:
        rows = self.conn.execute(
            "SELECT * FROM behavior_patterns ORDER BY row_id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [self._row_to_pattern(r) for r in reversed(rows)]

    def append_daily_insight(self, insight: DailyInsight) -> None:
        self.conn.execute(
            "INSERT INTO daily_insights "
            "(date, tasks_completed, tasks_total, completion_rate, focus_minutes, "
            "streak_days, mood, energy_level) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (insight.date, insight.tasks_completed, insight.tasks_total,
             insight.completion_rate, insight.focus_minutes, insight.streak_days,
             insight.mood, insight.energy_level),
        )
        self.conn.commit()

    def list_daily_insights(self, limit: int = 366) -> List[DailyInsight]:
        """Insight history in insertion order (oldest first)."""
        rows = self.conn.execute(
            "SELECT * FROM daily_insights ORDER BY row_id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [self._row_to_insight(r) for r in reversed(rows)]

    def append_agent_action(self, action: AgentAction) -> None:
        self.conn.execute(
            "INSERT INTO agent_actions "
            "(id, type, timestamp, input, output, status, duration) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (action.id, action.type, _fmt_dt(action.timestamp), action.input,
             action.output, action.status, action.duration),
        )
        self.conn.commit()

    def list_agent_actions(self, limit: int = 100) -> List[AgentAction]:
        rows = self.conn.execute(
            "SELECT * FROM agent_actions ORDER BY row_id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [self._row_to_action(r) for r in reversed(rows)]

    # ── Maintenance ─────────────────────────────────────────────────────────

    def reset_all_data(self) -> None:
        """Delete everything. Used by the seeder and tests."""
        for table in ["agent_actions", "daily_insights", "behavior_patterns",
                      "fitness_data", "tasks", "goals"]:
            self.conn.execute(f"DELETE FROM {table}")
        self.conn.commit()
        logger.warning("All data has been reset.")

    # ── Row mappers ─────────────────────────────────────────────────────────

    @staticmethod
    def _task_params(task: Task) -> tuple:
        return (
            task.id, task.goal_id, task.title, task.description,
            task.day_index, task.scheduled_date, task.start_time,
            task.estimated_minutes, task.actual_minutes, task.status,
            task.difficulty, _fmt_dt(task.completed_at), task.notes,
        )

    @staticmethod
    def _row_to_goal(row: sqlite3.Row) -> Goal:
        return Goal(id=row["id"], title=row["title"], category=row["category"],
                    target_value=row["target_value"],
                    current_value=row["current_value"],
                    created_at=_parse_dt(row["created_at"]))

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"], goal_id=row["goal_id"], title=row["title"],
            description=row["description"], day_index=row["day_index"],
            scheduled_date=row["scheduled_date"], start_time=row["start_time"],
            estimated_minutes=row["estimated_minutes"],
            actual_minutes=row["actual_minutes"], status=row["status"],
            difficulty=row["difficulty"],
            completed_at=_parse_dt(row["completed_at"]),
            notes=row["notes"],
        )

    @staticmethod
    def _row_to_fitness(row: sqlite3.Row) -> FitnessData:
        return FitnessData(
            date=row["date"], steps=row["steps"], steps_goal=row["steps_goal"],
            distance_km=row["distance_km"], active_minutes=row["active_minutes"],
            calories_burned=row["calories_burned"],
        )

    @staticmethod
    def _row_to_pattern(row: sqlite3.Row) -> BehaviorPattern:
        return BehaviorPattern(
            id=row["id"], type=row["type"], title=row["title"],
            description=row["description"], insight=row["insight"],
            confidence=row["confidence"],
            detected_at=_parse_dt(row["detected_at"]),
            data_points=row["data_points"], period=row["period"],
        )

    @staticmethod
    def _row_to_insight(row: sqlite3.Row) -> DailyInsight:
        return DailyInsight(
            date=row["date"], tasks_completed=row["tasks_completed"],
            tasks_total=row["tasks_total"],
            completion_rate=row["completion_rate"],
            focus_minutes=row["focus_minutes"], streak_days=row["streak_days"],
            mood=row["mood"], energy_level=row["energy_level"],
        )

    @staticmethod
    def _row_to_action(row: sqlite3.Row) -> AgentAction:
        return AgentAction(
            id=row["id"], type=row["type"],
            timestamp=_parse_dt(row["timestamp"]), input=row["input"],
            output=row["output"], status=row["status"],
            duration=row["duration"],
        )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The Repository is the ONLY place raw SQL queries live. The analysis
#   services call repo.get_tasks() / repo.append_daily_insight() instead of
#   writing SQL strings. This is the "Repository Pattern."
#
# Key methods:
#   - Tasks / goals: read the plan, patch goal progress (merge semantics).
#   - Fitness: one row per date, INSERT OR REPLACE keeps re-syncs idempotent.
#   - append_*: analysis outputs are history. Every call adds a row, nothing
#     is ever overwritten, so a dashboard can chart how patterns evolved.
#
# Data flow:
#   Service layer → Repository.method() → SQL → sqlite3.Row → dataclass model
#
# Interviewer-friendly talking points:
#   1. The repository is passed into services, never imported as a global,
#      so a test can hand in an in-memory DB or a failing stub.
#   2. Append-only tables use a surrogate row_id because pattern ids come
#      from the engine and are only unique within one run.
#   3. update_goal whitelists columns before building the SET clause, so a
#      caller's dict keys never reach SQL unchecked.
