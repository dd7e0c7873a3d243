"""
Recommendation Generator — turns patterns and today's insight into advice.

Rules are applied in order and their output keeps that order. The result is
never empty: if no rule fires, two general suggestions are returned.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from lifeplanner.data.models import (
    BehaviorPattern, DailyInsight, EnergyLevel, PatternType, Period,
)

LOW_COMPLETION = 50.0
HIGH_COMPLETION = 80.0

DEFAULT_RECOMMENDATIONS = (
    "Keep up your current routine, consistency is key!",
    "Take a 5-minute stretch break between tasks.",
)


def _find(patterns: Sequence[BehaviorPattern], pattern_type: str) -> Optional[BehaviorPattern]:
    return next((p for p in patterns if p.type == pattern_type), None)


def generate_recommendations(
    patterns: Sequence[BehaviorPattern], insight: DailyInsight
) -> List[str]:
    recommendations: List[str] = []

    peak = _find(patterns, PatternType.PRODUCTIVITY_PEAK)
    if peak is not None:
        period = peak.period or Period.EVENING
        recommendations.append(f"Schedule important tasks during {period} for best results.")

    if insight.completion_rate < LOW_COMPLETION:
        recommendations.append("Try reducing daily task count to build consistency.")
        recommendations.append("Consider shorter 25-minute focus sessions (Pomodoro technique).")
    elif insight.completion_rate >= HIGH_COMPLETION:
        recommendations.append("You're doing great! Consider adding one stretch goal.")

    focus = _find(patterns, PatternType.FOCUS_DURATION)
    if focus is not None and "longer" in focus.insight:
        recommendations.append("Add 10-minute buffer to task estimates.")

    if insight.energy_level == EnergyLevel.LOW:
        recommendations.append(
            "Your energy seems low, prioritize rest and lighter tasks tomorrow."
        )

    if not recommendations:
        recommendations.extend(DEFAULT_RECOMMENDATIONS)

    return recommendations
