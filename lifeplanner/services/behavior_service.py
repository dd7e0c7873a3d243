"""
Behavior Service — runs the analysis pipeline that feeds a replan.

Sequence: patterns over all tasks → today's insight → recommendations →
persist. The computed result is authoritative; the writes afterwards are
best-effort and independent of each other.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime
from typing import Callable, List, Optional

from lifeplanner.analysis.fitness import analyze_fitness_progress
from lifeplanner.analysis.insights import calculate_daily_insight
from lifeplanner.analysis.patterns import analyze_productivity_patterns
from lifeplanner.analysis.recommendations import generate_recommendations
from lifeplanner.config import DEFAULT_CONFIG
from lifeplanner.data.models import (
    AgentAction, AnalysisResult, FitnessData, FitnessProgress, Task,
)
from lifeplanner.data.repository import Repository
from lifeplanner.errors import InvalidInput

logger = logging.getLogger(__name__)


class BehaviorAnalyzer:
    """
    Entry point for behavior analysis.

    The repository is injected; the analyzer holds no state between runs.
    """

    def __init__(self, repo: Repository, config: Optional[dict] = None) -> None:
        self.repo = repo
        self.config = {**DEFAULT_CONFIG, **(config or {})}

    # ── Public API ──────────────────────────────────────────────────────────

    def analyze_behavior(
        self,
        tasks: Optional[List[Task]] = None,
        fitness: Optional[FitnessData] = None,
        now: Optional[datetime] = None,
    ) -> AnalysisResult:
        """
        Analyze tasks + today's fitness and store the outcome.

        Either input defaults to what the repository holds. Returns
        patterns, the daily insight and recommendations even if storing
        them fails.
        """
        started = time.perf_counter()
        now = now or datetime.now()
        today = now.date()

        if tasks is None:
            tasks = self.repo.get_tasks()
        if fitness is None:
            fitness = self._todays_fitness(today)

        patterns = analyze_productivity_patterns(tasks, now)
        insight = calculate_daily_insight(
            tasks, fitness, history=self.repo.list_daily_insights(), today=today
        )
        recommendations = generate_recommendations(patterns, insight)

        for pattern in patterns:
            self._persist(self.repo.append_behavior_pattern, pattern, "pattern %s" % pattern.id)
        self._persist(self.repo.append_daily_insight, insight, "insight for %s" % insight.date)

        action = AgentAction(
            id=f"action-{int(now.timestamp() * 1000)}",
            type="analyze_behavior",
            timestamp=now,
            input=f"Analyzed {len(tasks)} tasks and fitness data",
            output=(
                f"Detected {len(patterns)} patterns, "
                f"generated {len(recommendations)} recommendations"
            ),
            status="completed",
            duration=int((time.perf_counter() - started) * 1000),
        )
        self._persist(self.repo.append_agent_action, action, "agent action")

        logger.info(
            "Behavior analysis: %d tasks, %d patterns, %d recommendations",
            len(tasks), len(patterns), len(recommendations),
        )
        return AnalysisResult(
            patterns=patterns, insight=insight, recommendations=recommendations
        )

    def review_fitness(self, days: Optional[int] = None) -> FitnessProgress:
        """Trend over the last `days` stored snapshots. Raises InvalidInput if none or days < 1."""
        if days is None:
            days = self.config["fitness_review_days"]
        if days < 1:
            raise InvalidInput(f"days must be at least 1, got {days}")
        history = self.repo.list_fitness_history(days)
        return analyze_fitness_progress(history)

    # ── Internal ────────────────────────────────────────────────────────────

    def _todays_fitness(self, today: date) -> FitnessData:
        stored = self.repo.get_fitness(today.isoformat())
        if stored is not None:
            return stored
        logger.info("No fitness snapshot for %s; assuming zero steps.", today)
        return FitnessData(
            date=today.isoformat(), steps_goal=self.config["default_steps_goal"]
        )

    @staticmethod
    def _persist(write: Callable, item, label: str) -> None:
        """One independent write. A failure is logged and the run goes on."""
        try:
            write(item)
        except Exception:
            logger.exception("Failed to store %s", label)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The orchestrator behind "replan". It wires the four pure analysis steps
#   together, writes their output to history, and leaves an audit record.
#
# Key design decisions:
#   - Pure functions do the thinking, this class does the I/O. Every
#     analyzer can be tested without a database.
#   - Writes are fire-and-forget: each one has its own try/except so a bad
#     pattern row can't stop the insight row or the returned result.
#   - duration is measured with perf_counter, not made up.
#
# Data flow:
#   repo.get_tasks() + today's FitnessData → patterns → insight (with streak
#   from stored insights) → recommendations → repo.append_*() → AnalysisResult
#
# Interviewer-friendly talking points:
#   1. Dependency injection: the repo comes in through __init__, so tests
#      hand in an in-memory DB or a stub that raises on purpose.
#   2. Persistence is best-effort: the caller gets the analysis even when
#      the disk is flaky.
