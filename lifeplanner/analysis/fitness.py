"""
Fitness Trend Analyzer — weekly step totals and a simple trend label.

The trend compares the mean steps of the second half of the history with the
first half: more than 10% up is "improving", more than 10% down is
"declining", anything in between is "stable".
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from lifeplanner.analysis.stats import round_half_up
from lifeplanner.data.models import FitnessData, FitnessProgress, Trend
from lifeplanner.errors import InvalidInput

logger = logging.getLogger(__name__)

TREND_BAND = 0.1
EXCELLENT_DAYS = 5
GOOD_DAYS = 3
METERS_PER_STEP = 0.762


def analyze_fitness_progress(history: Sequence[FitnessData]) -> FitnessProgress:
    """Summarize a chronological run of daily snapshots (usually a week)."""
    if not history:
        raise InvalidInput("Fitness history is empty; at least one day is required.")

    steps = np.array([d.steps for d in history], dtype=float)
    goals = np.array([d.steps_goal for d in history], dtype=float)

    weekly_steps = int(steps.sum())
    avg_daily_steps = round_half_up(weekly_steps / len(steps))
    goal_days = int(np.count_nonzero(steps >= goals))

    trend = classify_trend(steps)
    progress = FitnessProgress(
        weekly_steps=weekly_steps,
        avg_daily_steps=avg_daily_steps,
        goal_achievement_days=goal_days,
        trend=trend,
        message=_progress_message(goal_days, len(history)),
    )
    logger.debug("Fitness over %d days: %d steps, trend=%s", len(history), weekly_steps, trend)
    return progress


def classify_trend(steps: np.ndarray) -> str:
    split = len(steps) // 2
    first, second = steps[:split], steps[split:]
    if len(first) == 0:
        # a single day has nothing to compare against
        return Trend.STABLE

    first_avg = float(first.mean())
    second_avg = float(second.mean())
    if second_avg > first_avg * (1 + TREND_BAND):
        return Trend.IMPROVING
    if second_avg < first_avg * (1 - TREND_BAND):
        return Trend.DECLINING
    return Trend.STABLE


def _progress_message(goal_days: int, total_days: int) -> str:
    if goal_days >= EXCELLENT_DAYS:
        return f"Excellent! You hit your step goal {goal_days}/{total_days} days this week."
    if goal_days >= GOOD_DAYS:
        return f"Good progress! {goal_days} days at goal. Keep building that momentum!"
    return (
        f"You reached your goal {goal_days} days. "
        "Try breaking walks into 3 short sessions."
    )


def estimate_distance_km(steps: int) -> float:
    """Walking distance from a step count, to two decimals."""
    return round_half_up(steps * METERS_PER_STEP / 10) / 100
