"""
Pattern Detector — derives behavioral patterns from a task list.

Four detectors run in a fixed order and each contributes at most one
pattern:

  1. productivity_peak   which time of day has the best completion rate
  2. completion_rate     overall done / total (always emitted)
  3. skip_pattern        skipped or rescheduled tasks, and whether they're hard
  4. focus_duration      actual vs. planned minutes on finished tasks

Every threshold is a fixed heuristic, not a fitted model.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from lifeplanner.analysis.stats import mean, rate, round_half_up
from lifeplanner.data.models import (
    BehaviorPattern, Difficulty, PatternType, Period, Task, TaskStatus,
)

logger = logging.getLogger(__name__)

PEAK_CONFIDENCE_CAP = 0.9
COMPLETION_CONFIDENCE_CAP = 0.95
SKIP_CONFIDENCE = 0.75
FOCUS_CONFIDENCE = 0.8
CONSISTENCY_THRESHOLD = 70.0  # percent

SKIPPED_STATUSES = (TaskStatus.SKIPPED, TaskStatus.RESCHEDULED)


def period_for_hour(hour: int) -> str:
    if hour < 12:
        return Period.MORNING
    if hour < 17:
        return Period.AFTERNOON
    if hour < 20:
        return Period.EVENING
    return Period.NIGHT


def parse_start_hour(start_time: str) -> Optional[int]:
    """Hour from an "HH:MM" string, or None if it isn't one."""
    try:
        hour = int(str(start_time).split(":")[0])
    except ValueError:
        return None
    if not 0 <= hour <= 23:
        return None
    return hour


def analyze_productivity_patterns(
    tasks: Sequence[Task], now: Optional[datetime] = None
) -> List[BehaviorPattern]:
    """Run every detector over ``tasks``; patterns come back in detection order."""
    now = now or datetime.now()
    run_ms = int(now.timestamp() * 1000)

    detectors = (
        (1, _detect_productivity_peak),
        (2, _detect_completion_rate),
        (3, _detect_skip_pattern),
        (4, _detect_focus_duration),
    )
    patterns: List[BehaviorPattern] = []
    for slot, detect in detectors:
        pattern = detect(tasks)
        if pattern is None:
            continue
        pattern.id = f"pattern-{run_ms}-{slot}"
        pattern.detected_at = now
        patterns.append(pattern)

    logger.debug("Detected %d patterns from %d tasks", len(patterns), len(tasks))
    return patterns


def period_completion_rates(tasks: Sequence[Task]) -> Dict[str, Tuple[int, int]]:
    """(done, total) per period. Tasks with an unreadable start time are left out."""
    buckets: Dict[str, Tuple[int, int]] = {p: (0, 0) for p in Period.ALL}
    for task in tasks:
        hour = parse_start_hour(task.start_time)
        if hour is None:
            logger.debug("Skipping task %s with start time %r", task.id, task.start_time)
            continue
        period = period_for_hour(hour)
        done, total = buckets[period]
        buckets[period] = (done + (task.status == TaskStatus.DONE), total + 1)
    return buckets


# ── Detectors ───────────────────────────────────────────────────────────────

def _detect_productivity_peak(tasks: Sequence[Task]) -> Optional[BehaviorPattern]:
    buckets = period_completion_rates(tasks)

    # Period.ALL is the tie-break order: the first period to reach the best
    # rate keeps it.
    best_period, best_rate = None, 0.0
    for period in Period.ALL:
        done, total = buckets[period]
        period_rate = rate(done, total)
        if period_rate > best_rate:
            best_period, best_rate = period, period_rate

    if best_period is None:
        return None

    return BehaviorPattern(
        type=PatternType.PRODUCTIVITY_PEAK,
        title="Peak Productivity Time",
        description=f"Your {best_period} sessions are most effective",
        insight=(
            f"Your most productive time is {best_period} with "
            f"{round_half_up(best_rate)}% task completion rate."
        ),
        confidence=min(PEAK_CONFIDENCE_CAP, (best_rate + 10) / 100),
        data_points=sum(total for _, total in buckets.values()),
        period=best_period,
    )


def _detect_completion_rate(tasks: Sequence[Task]) -> BehaviorPattern:
    done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
    overall = rate(done, len(tasks))
    consistent = overall >= CONSISTENCY_THRESHOLD

    verdict = "Great consistency!" if consistent else "Room for improvement"
    advice = "Great consistency!" if consistent else "Room for improvement, try smaller tasks."
    return BehaviorPattern(
        type=PatternType.COMPLETION_RATE,
        title="Task Completion Rate",
        description=verdict,
        insight=f"Your overall completion rate is {round_half_up(overall)}%. {advice}",
        confidence=min(COMPLETION_CONFIDENCE_CAP, (50 + overall / 2) / 100),
        data_points=len(tasks),
    )


def _detect_skip_pattern(tasks: Sequence[Task]) -> Optional[BehaviorPattern]:
    skipped = [t for t in tasks if t.status in SKIPPED_STATUSES]
    if not skipped:
        return None

    hard = sum(1 for t in skipped if t.difficulty == Difficulty.HARD)
    if hard > len(skipped) / 2:
        reason = "You tend to skip harder tasks. Consider breaking them into smaller chunks."
    else:
        reason = "Some tasks are being rescheduled. Try adjusting your daily load."

    return BehaviorPattern(
        type=PatternType.SKIP_PATTERN,
        title="Task Skipping Pattern",
        description="Some tasks are being skipped",
        insight=reason,
        confidence=SKIP_CONFIDENCE,
        data_points=len(skipped),
    )


def _detect_focus_duration(tasks: Sequence[Task]) -> Optional[BehaviorPattern]:
    worked = [t for t in tasks if t.status == TaskStatus.DONE and t.actual_minutes]
    if not worked:
        return None

    avg_actual = round_half_up(mean([t.actual_minutes for t in worked]))
    avg_planned = round_half_up(mean([t.estimated_minutes for t in worked]))
    if avg_actual < avg_planned:
        verdict = "You finish faster than expected!"
    else:
        verdict = "Tasks take longer, consider adding buffer time."

    return BehaviorPattern(
        type=PatternType.FOCUS_DURATION,
        title="Focus Session Duration",
        description=f"Average session: {avg_actual} mins",
        insight=(
            f"Your average focus session is {avg_actual} mins "
            f"(planned: {avg_planned} mins). {verdict}"
        ),
        confidence=FOCUS_CONFIDENCE,
        data_points=len(worked),
    )
