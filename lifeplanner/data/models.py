"""
Data models for LifePlanner.

These are plain dataclasses that represent database rows and analysis
results. They decouple the rest of the app from raw SQL dictionaries so every
layer speaks the same "language." At the JSON boundary every entity is
serialized with camelCase keys via ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Optional


class TaskStatus:
    """Allowed values for Task.status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    SKIPPED = "skipped"
    RESCHEDULED = "rescheduled"

    ALL = (PENDING, IN_PROGRESS, DONE, SKIPPED, RESCHEDULED)


class Difficulty:
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PatternType:
    PRODUCTIVITY_PEAK = "productivity_peak"
    COMPLETION_RATE = "completion_rate"
    SKIP_PATTERN = "skip_pattern"
    FOCUS_DURATION = "focus_duration"


class Period:
    """Time-of-day buckets, listed in tie-break priority order."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    ALL = (MORNING, AFTERNOON, EVENING, NIGHT)


class Mood:
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    TIRED = "tired"


class EnergyLevel:
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Trend:
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Serializable:
    """Mixin: camelCase dict view of a dataclass, for the JSON boundary."""

    # attribute name -> key, where plain camelCase is not what callers expect
    _key_overrides: Dict[str, str] = {}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            key = self._key_overrides.get(f.name, _camel(f.name))
            out[key] = _jsonable(getattr(self, f.name))
        return out


@dataclass
class Goal(_Serializable):
    """A user objective; current_value tracks completed tasks against it."""
    id: str = ""
    title: str = ""
    category: str = ""
    target_value: float = 0.0
    current_value: float = 0.0
    created_at: Optional[datetime] = None


@dataclass
class Task(_Serializable):
    """One scheduled unit of work. day_index 0 means today."""
    id: str = ""
    goal_id: Optional[str] = None
    title: str = ""
    description: str = ""
    day_index: int = 0
    scheduled_date: Optional[str] = None   # YYYY-MM-DD
    start_time: str = "09:00"              # HH:MM
    estimated_minutes: int = 30
    actual_minutes: Optional[int] = None
    status: str = TaskStatus.PENDING
    difficulty: str = Difficulty.MEDIUM
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass
class FitnessData(_Serializable):
    """A single day's activity snapshot."""
    date: str = ""                          # YYYY-MM-DD
    steps: int = 0
    steps_goal: int = 10000
    distance_km: float = 0.0
    active_minutes: int = 0
    calories_burned: int = 0


@dataclass
class BehaviorPattern(_Serializable):
    """
    A typed observation about task-completion behavior.

    ``period`` is only set for productivity_peak patterns and carries the
    winning time-of-day bucket so consumers never have to parse ``insight``.
    """
    id: str = ""
    type: str = ""
    title: str = ""
    description: str = ""
    insight: str = ""
    confidence: float = 0.0
    detected_at: Optional[datetime] = None
    data_points: int = 0
    period: Optional[str] = None


@dataclass
class DailyInsight(_Serializable):
    """Per-day rollup of completion, focus time, mood and energy."""
    date: str = ""
    tasks_completed: int = 0
    tasks_total: int = 0
    completion_rate: float = 0.0           # 0-100, unrounded
    focus_minutes: int = 0
    streak_days: int = 0
    mood: str = Mood.OKAY
    energy_level: str = EnergyLevel.MEDIUM


@dataclass
class AgentAction(_Serializable):
    """Audit record of one engine invocation."""
    id: str = ""
    type: str = ""
    timestamp: Optional[datetime] = None
    input: str = ""
    output: str = ""
    status: str = "completed"
    duration: int = 0                       # milliseconds


@dataclass
class FitnessProgress(_Serializable):
    weekly_steps: int = 0
    avg_daily_steps: int = 0
    goal_achievement_days: int = 0
    trend: str = Trend.STABLE
    message: str = ""


@dataclass
class AnalysisResult(_Serializable):
    """What a replan receives from one behavior analysis run."""
    patterns: List[BehaviorPattern] = field(default_factory=list)
    insight: DailyInsight = field(default_factory=DailyInsight)
    recommendations: List[str] = field(default_factory=list)

    _key_overrides = {"insight": "insights"}


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the shape of every object in the system as Python dataclasses:
#   the stored entities (Task, Goal, FitnessData) and the analysis outputs
#   (BehaviorPattern, DailyInsight, AgentAction, FitnessProgress).
#
# Key classes and why they exist:
#   - Task / Goal: the plan. Tasks point at a goal so completing one can
#     bump the goal's progress counter.
#   - BehaviorPattern: carries a typed `period` next to its prose so the
#     recommendation step reads structured data, not sentences.
#   - AnalysisResult: the bundle a replan consumes.
#
# Data flow:
#   Repository rows → dataclasses → analysis functions → dataclasses →
#   to_dict() → JSON (camelCase keys) at the edge.
#
# Interviewer-friendly talking points:
#   1. String-constant classes (TaskStatus, Period) instead of Enum keep the
#      values identical to what sits in SQLite and JSON, no .value juggling.
#   2. Period.ALL doubles as the tie-break order for peak detection.
#   3. The serialization mixin is tiny on purpose: dataclasses.fields plus a
#      snake → camel rename covers every entity.
