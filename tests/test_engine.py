"""Tests for sleepmon.analytics.engine -- the recompute pipeline."""

from datetime import datetime, timezone

from sleepmon.models import AppData, GoalType, InsightType
from sleepmon.analytics.engine import RecomputeResult, recompute_all, refresh

from helpers import NOW, make_nightly, make_series, make_session


class TestRecomputeAll:
    def test_empty_history(self, goals, achievements):
        result = recompute_all([], goals, achievements, now=NOW)
        assert result.goals == goals
        assert all(g.current == 0 for g in result.goals)
        assert result.achievements == achievements
        assert len(result.insights) == 1
        assert result.insights[0].type == InsightType.INFO
        assert not result.metrics.has_data
        assert result.unlocked == []

    def test_seeds_missing_goals_and_achievements(self):
        result = recompute_all([make_session()], (), (), now=NOW)
        assert len(result.goals) == 4
        assert len(result.achievements) == 10
        assert [a.id for a in result.unlocked] == ["first_sleep"]

    def test_full_pass(self, goals, achievements):
        sessions = make_series([400] * 7 + [500] * 7, [5] * 14)
        result = recompute_all(sessions, goals, achievements, now=NOW)

        by_type = {g.type: g for g in result.goals}
        assert by_type[GoalType.DURATION].current == 500
        assert by_type[GoalType.QUALITY].current == 5.0
        assert by_type[GoalType.STREAK].current == 14

        unlocked = {a.id for a in result.achievements if a.unlocked}
        assert {"first_sleep", "early_bird", "quality_master",
                "week_streak", "quality_streak"} <= unlocked
        assert "perfect_week" in unlocked  # last 7 at 500 min
        assert result.insights[-1].title == "Improving Sleep Duration"
        assert result.metrics.session_count == 14
        assert len(result.recommendations) == 8

    def test_second_pass_is_stable(self, goals, achievements):
        sessions = make_nightly(10, quality=5)
        first = recompute_all(sessions, goals, achievements, now=NOW)
        later = datetime(2025, 1, 1, tzinfo=timezone.utc)
        second = recompute_all(sessions, first.goals, first.achievements, now=later)
        assert second.goals == first.goals
        assert second.achievements == first.achievements
        assert second.unlocked == []

    def test_repr(self, goals, achievements):
        result = recompute_all([make_session()], goals, achievements, now=NOW)
        assert isinstance(result, RecomputeResult)
        assert "first_sleep" in repr(result)


class TestRefresh:
    def test_updates_snapshot(self, app_data):
        data = AppData(
            sessions=tuple(make_nightly(7)),
            goals=app_data.goals,
            achievements=app_data.achievements,
        )
        updated, result = refresh(data, now=NOW)
        assert updated.sessions == data.sessions
        assert updated.goals == result.goals
        assert updated.achievements == result.achievements
        assert data.goals[0].current == 0  # input snapshot untouched

    def test_fresh_snapshot_seeded(self):
        updated, _ = refresh(AppData(), now=NOW)
        assert len(updated.goals) == 4
        assert len(updated.achievements) == 10
