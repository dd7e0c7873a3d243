"""
Daily Insight Calculator — rolls today's tasks and fitness into one summary.

Mood and energy are rule-of-thumb labels from two percentages: today's task
completion rate and how much of the step goal was reached.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from lifeplanner.analysis.stats import rate
from lifeplanner.data.models import (
    DailyInsight, EnergyLevel, FitnessData, Mood, Task, TaskStatus,
)

logger = logging.getLogger(__name__)


def calculate_daily_insight(
    tasks: Sequence[Task],
    fitness: FitnessData,
    history: Iterable[DailyInsight] = (),
    today: Optional[date] = None,
) -> DailyInsight:
    """
    Summarize today (tasks with day_index 0) against a fitness snapshot.

    ``history`` is the stored insight history used for the streak count.
    """
    today = today or date.today()
    today_tasks = [t for t in tasks if t.day_index == 0]
    done = [t for t in today_tasks if t.status == TaskStatus.DONE]

    completion_rate = rate(len(done), len(today_tasks))
    steps_achieved = steps_achieved_percent(fitness)
    focus_minutes = sum(t.actual_minutes or t.estimated_minutes for t in done)

    insight = DailyInsight(
        date=today.isoformat(),
        tasks_completed=len(done),
        tasks_total=len(today_tasks),
        completion_rate=completion_rate,
        focus_minutes=focus_minutes,
        streak_days=compute_streak_days(history, today, len(done)),
        mood=estimate_mood(completion_rate, steps_achieved),
        energy_level=estimate_energy(completion_rate, steps_achieved),
    )
    logger.debug(
        "Insight %s: %d/%d done, steps %.0f%%, mood=%s energy=%s",
        insight.date, insight.tasks_completed, insight.tasks_total,
        steps_achieved, insight.mood, insight.energy_level,
    )
    return insight


def steps_achieved_percent(fitness: FitnessData) -> float:
    """Steps as a percentage of the goal; a missing goal counts as 0%."""
    return rate(fitness.steps, fitness.steps_goal)


def estimate_mood(completion_rate: float, steps_achieved: float) -> str:
    # first matching branch wins
    if completion_rate >= 80 and steps_achieved >= 80:
        return Mood.GREAT
    if completion_rate >= 60 or steps_achieved >= 60:
        return Mood.GOOD
    if completion_rate < 30 and steps_achieved < 30:
        return Mood.TIRED
    return Mood.OKAY


def estimate_energy(completion_rate: float, steps_achieved: float) -> str:
    score = (completion_rate + steps_achieved) / 2
    if score >= 70:
        return EnergyLevel.HIGH
    if score < 40:
        return EnergyLevel.LOW
    return EnergyLevel.MEDIUM


def compute_streak_days(
    history: Iterable[DailyInsight], today: date, completed_today: int
) -> int:
    """
    Consecutive days, ending today, with at least one completed task.

    The latest stored insight for a date wins. Today is taken from
    ``completed_today`` rather than history. If nothing is done yet today the
    streak is counted through yesterday, since the day isn't over.
    """
    completed_by_day = {}
    for insight in history:
        try:
            day = date.fromisoformat(insight.date)
        except ValueError:
            logger.debug("Ignoring insight with bad date %r", insight.date)
            continue
        completed_by_day[day] = insight.tasks_completed
    completed_by_day[today] = completed_today

    day = today if completed_today > 0 else today - timedelta(days=1)
    streak = 0
    while completed_by_day.get(day, 0) > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak
