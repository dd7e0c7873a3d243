"""Unit tests for the analysis engine (patterns, insight, recommendations, fitness)."""

import pytest
from datetime import date, datetime
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lifeplanner.analysis.fitness import (
    analyze_fitness_progress, classify_trend, estimate_distance_km,
)
from lifeplanner.analysis.insights import (
    calculate_daily_insight, compute_streak_days, estimate_energy, estimate_mood,
)
from lifeplanner.analysis.patterns import (
    analyze_productivity_patterns, parse_start_hour, period_for_hour,
)
from lifeplanner.analysis.recommendations import (
    DEFAULT_RECOMMENDATIONS, generate_recommendations,
)
from lifeplanner.analysis.stats import round_half_up
from lifeplanner.data.models import BehaviorPattern, DailyInsight, FitnessData, Task
from lifeplanner.errors import InvalidInput

NOW = datetime(2026, 3, 10, 21, 0)
TODAY = date(2026, 3, 10)


def _task(start="09:00", status="pending", **kw) -> Task:
    kw.setdefault("id", f"t-{start}-{status}")
    return Task(start_time=start, status=status, **kw)


def _by_type(patterns):
    return {p.type: p for p in patterns}


def _fitness(steps=0, goal=10000) -> FitnessData:
    return FitnessData(date=TODAY.isoformat(), steps=steps, steps_goal=goal)


class TestHelpers:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2
        assert round_half_up(0.5) == 1

    @pytest.mark.parametrize("hour,period", [
        (0, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"),
        (17, "evening"), (19, "evening"), (20, "night"), (23, "night"),
    ])
    def test_period_boundaries(self, hour, period):
        assert period_for_hour(hour) == period

    def test_parse_start_hour(self):
        assert parse_start_hour("07:45") == 7
        assert parse_start_hour("") is None
        assert parse_start_hour("soon") is None
        assert parse_start_hour("25:00") is None


class TestPatterns:
    def test_empty_task_list(self):
        patterns = analyze_productivity_patterns([], NOW)
        assert [p.type for p in patterns] == ["completion_rate"]
        assert patterns[0].confidence == pytest.approx(0.5)
        assert patterns[0].data_points == 0

    def test_morning_peak(self):
        tasks = [_task("09:00", "done"), _task("09:30", "done"), _task("19:00", "pending")]
        peak = _by_type(analyze_productivity_patterns(tasks, NOW))["productivity_peak"]
        assert peak.period == "morning"
        assert "morning" in peak.insight
        assert "100%" in peak.insight
        assert peak.confidence == pytest.approx(0.9)
        assert peak.data_points == 3

    def test_no_peak_without_completions(self):
        tasks = [_task("09:00"), _task("14:00", "skipped"), _task("21:00")]
        types = [p.type for p in analyze_productivity_patterns(tasks, NOW)]
        assert "productivity_peak" not in types

    def test_tie_goes_to_earlier_period(self):
        tasks = [_task("21:00", "done"), _task("13:00", "done"), _task("08:00", "done")]
        peak = _by_type(analyze_productivity_patterns(tasks, NOW))["productivity_peak"]
        assert peak.period == "morning"

    def test_peak_confidence_below_cap(self):
        tasks = [_task("13:00", "done"), _task("13:30"), _task("14:00"), _task("15:00")]
        peak = _by_type(analyze_productivity_patterns(tasks, NOW))["productivity_peak"]
        assert peak.period == "afternoon"
        assert peak.confidence == pytest.approx(0.35)

    def test_unparseable_start_times_are_not_bucketed(self):
        tasks = [_task("09:00", "done"), _task("whenever", "done", id="x")]
        patterns = _by_type(analyze_productivity_patterns(tasks, NOW))
        assert patterns["productivity_peak"].data_points == 1
        assert patterns["completion_rate"].data_points == 2

    def test_detection_order_and_ids(self):
        tasks = [
            _task("09:00", "done", actual_minutes=50, estimated_minutes=30),
            _task("10:00", "skipped", difficulty="hard"),
        ]
        patterns = analyze_productivity_patterns(tasks, NOW)
        assert [p.type for p in patterns] == [
            "productivity_peak", "completion_rate", "skip_pattern", "focus_duration",
        ]
        assert len({p.id for p in patterns}) == 4
        assert all(p.detected_at == NOW for p in patterns)

    def test_completion_rate_branches(self):
        good = [_task(status="done", id=str(i)) for i in range(7)] + [_task(id="x"), _task(id="y")]
        pattern = _by_type(analyze_productivity_patterns(good, NOW))["completion_rate"]
        assert pattern.description == "Great consistency!"

        poor = [_task(status="done", id="a"), _task(id="b"), _task(id="c")]
        pattern = _by_type(analyze_productivity_patterns(poor, NOW))["completion_rate"]
        assert pattern.description == "Room for improvement"
        assert "33%" in pattern.insight

    def test_completion_confidence_capped(self):
        tasks = [_task(status="done", id=str(i)) for i in range(4)]
        pattern = _by_type(analyze_productivity_patterns(tasks, NOW))["completion_rate"]
        assert pattern.confidence == pytest.approx(0.95)

    def test_skip_pattern_hard_tasks(self):
        tasks = [
            _task(status="skipped", difficulty="hard", id="a"),
            _task(status="rescheduled", difficulty="hard", id="b"),
            _task(status="skipped", difficulty="easy", id="c"),
            _task(status="done", id="d"),
        ]
        skip = _by_type(analyze_productivity_patterns(tasks, NOW))["skip_pattern"]
        assert "smaller chunks" in skip.insight
        assert skip.data_points == 3
        assert skip.confidence == 0.75

    def test_skip_pattern_half_hard_is_load_message(self):
        tasks = [
            _task(status="skipped", difficulty="hard", id="a"),
            _task(status="skipped", difficulty="easy", id="b"),
        ]
        skip = _by_type(analyze_productivity_patterns(tasks, NOW))["skip_pattern"]
        assert "daily load" in skip.insight

    def test_focus_duration_faster(self):
        tasks = [
            _task(status="done", actual_minutes=20, estimated_minutes=30, id="a"),
            _task(status="done", actual_minutes=25, estimated_minutes=30, id="b"),
            _task(status="done", estimated_minutes=90, id="c"),  # no actual, ignored
        ]
        focus = _by_type(analyze_productivity_patterns(tasks, NOW))["focus_duration"]
        assert focus.data_points == 2
        assert "23 mins" in focus.insight  # 22.5 rounds up
        assert "faster" in focus.insight
        assert focus.confidence == 0.8

    def test_focus_duration_longer(self):
        tasks = [_task(status="done", actual_minutes=40, estimated_minutes=40)]
        focus = _by_type(analyze_productivity_patterns(tasks, NOW))["focus_duration"]
        assert "longer" in focus.insight

    def test_no_focus_pattern_without_actuals(self):
        tasks = [_task(status="done"), _task(status="pending", actual_minutes=10, id="p")]
        types = [p.type for p in analyze_productivity_patterns(tasks, NOW)]
        assert "focus_duration" not in types


class TestDailyInsight:
    def test_all_pending_today(self):
        tasks = [_task(f"0{h}:00", id=str(h)) for h in range(6, 10)]
        insight = calculate_daily_insight(tasks, _fitness(steps=5000), today=TODAY)
        assert insight.tasks_total == 4
        assert insight.tasks_completed == 0
        assert insight.completion_rate == 0
        assert insight.mood == "okay"      # 0% tasks, 50% steps
        assert insight.energy_level == "low"

    def test_only_today_counts(self):
        tasks = [
            _task(status="done", day_index=0, actual_minutes=40, estimated_minutes=30, id="a"),
            _task(status="done", day_index=0, estimated_minutes=20, id="b"),
            _task(status="pending", day_index=0, id="c"),
            _task(status="done", day_index=-1, id="old"),
            _task(status="pending", day_index=1, id="tomorrow"),
        ]
        insight = calculate_daily_insight(tasks, _fitness(steps=9000), today=TODAY)
        assert insight.tasks_total == 3
        assert insight.tasks_completed == 2
        assert insight.completion_rate == pytest.approx(200 / 3)
        assert insight.focus_minutes == 60
        assert insight.date == "2026-03-10"

    def test_empty_day(self):
        insight = calculate_daily_insight([], _fitness(), today=TODAY)
        assert insight.completion_rate == 0
        assert insight.tasks_completed <= insight.tasks_total
        assert insight.mood == "tired"

    def test_zero_step_goal(self):
        insight = calculate_daily_insight([], _fitness(steps=4000, goal=0), today=TODAY)
        assert insight.energy_level == "low"

    @pytest.mark.parametrize("completion,steps,mood", [
        (80, 80, "great"),
        (100, 79, "good"),
        (0, 60, "good"),
        (60, 0, "good"),
        (29, 29, "tired"),
        (29, 30, "okay"),
        (50, 50, "okay"),
    ])
    def test_mood_order(self, completion, steps, mood):
        assert estimate_mood(completion, steps) == mood

    @pytest.mark.parametrize("completion,steps,energy", [
        (70, 70, "high"), (100, 40, "high"), (40, 40, "medium"), (39, 40, "low"),
    ])
    def test_energy(self, completion, steps, energy):
        assert estimate_energy(completion, steps) == energy


class TestStreak:
    def _history(self, *entries):
        return [DailyInsight(date=d, tasks_completed=n, tasks_total=max(n, 1)) for d, n in entries]

    def test_consecutive_days(self):
        history = self._history(("2026-03-08", 2), ("2026-03-09", 1))
        assert compute_streak_days(history, TODAY, completed_today=1) == 3

    def test_gap_breaks_streak(self):
        history = self._history(("2026-03-07", 3), ("2026-03-09", 1))
        assert compute_streak_days(history, TODAY, completed_today=2) == 2

    def test_nothing_today_counts_through_yesterday(self):
        history = self._history(("2026-03-08", 2), ("2026-03-09", 1))
        assert compute_streak_days(history, TODAY, completed_today=0) == 2

    def test_latest_entry_for_a_day_wins(self):
        history = self._history(("2026-03-09", 2), ("2026-03-09", 0))
        assert compute_streak_days(history, TODAY, completed_today=1) == 1

    def test_no_history(self):
        assert compute_streak_days([], TODAY, completed_today=0) == 0


class TestRecommendations:
    def _insight(self, rate=65.0, energy="medium"):
        return DailyInsight(date="2026-03-10", completion_rate=rate, energy_level=energy)

    def test_defaults_when_nothing_fires(self):
        assert generate_recommendations([], self._insight()) == list(DEFAULT_RECOMMENDATIONS)

    def test_peak_uses_period_field(self):
        peak = BehaviorPattern(type="productivity_peak", period="afternoon",
                               insight="unrelated text mentioning morning")
        recs = generate_recommendations([peak], self._insight())
        assert recs == ["Schedule important tasks during afternoon for best results."]

    def test_low_completion_adds_two(self):
        recs = generate_recommendations([], self._insight(rate=0))
        assert len(recs) == 2
        assert "reducing daily task count" in recs[0]
        assert "25-minute" in recs[1]

    def test_high_completion_stretch_goal(self):
        recs = generate_recommendations([], self._insight(rate=80))
        assert recs == ["You're doing great! Consider adding one stretch goal."]

    def test_rule_order(self):
        patterns = [
            BehaviorPattern(type="productivity_peak", period="night"),
            BehaviorPattern(type="focus_duration", insight="Tasks take longer, consider adding buffer time."),
        ]
        recs = generate_recommendations(patterns, self._insight(rate=10, energy="low"))
        assert len(recs) == 5
        assert "night" in recs[0]
        assert "buffer" in recs[3]
        assert "energy" in recs[4]

    def test_faster_focus_adds_nothing(self):
        patterns = [BehaviorPattern(type="focus_duration", insight="You finish faster than expected!")]
        assert generate_recommendations(patterns, self._insight()) == list(DEFAULT_RECOMMENDATIONS)


class TestFitness:
    def _history(self, steps, goal=3000):
        return [FitnessData(date=f"2026-03-0{i + 1}", steps=s, steps_goal=goal)
                for i, s in enumerate(steps)]

    def test_improving_week(self):
        progress = analyze_fitness_progress(
            self._history([1000, 1000, 1000, 1000, 5000, 5000, 5000])
        )
        assert progress.weekly_steps == 19000
        assert progress.avg_daily_steps == 2714
        assert progress.goal_achievement_days == 3
        assert progress.trend == "improving"
        assert progress.message.startswith("Good progress! 3 days")

    def test_declining_week(self):
        progress = analyze_fitness_progress(self._history([9000, 9000, 9000, 4000, 4000, 4000, 4000]))
        assert progress.trend == "declining"
        assert progress.goal_achievement_days == 7
        assert progress.message.startswith("Excellent!")
        assert "7/7" in progress.message

    def test_stable_within_band(self):
        progress = analyze_fitness_progress(self._history([5000, 5000, 5400, 5400]))
        assert progress.trend == "stable"

    def test_encouragement_tier(self):
        progress = analyze_fitness_progress(self._history([100, 200]))
        assert progress.goal_achievement_days == 0
        assert "3 short sessions" in progress.message

    def test_single_day_is_stable(self):
        progress = analyze_fitness_progress(self._history([4000]))
        assert progress.trend == "stable"
        assert progress.avg_daily_steps == 4000

    def test_empty_history_rejected(self):
        with pytest.raises(InvalidInput):
            analyze_fitness_progress([])

    def test_classify_trend_split_point(self):
        import numpy as np
        # floor(5/2) = 2 -> first half [0, 1], second half [2, 3, 4]
        assert classify_trend(np.array([100.0, 100.0, 100.0, 200.0, 200.0])) == "improving"

    def test_distance_estimate(self):
        assert estimate_distance_km(10000) == pytest.approx(7.62)
        assert estimate_distance_km(0) == 0
