"""Recompute pipeline: derive every view of the session history in one pass.

Callers invoke :func:`recompute_all` (or :func:`refresh` on an
:class:`~sleepmon.models.AppData` snapshot) after each change to the
session list or to goal targets.  Nothing is recomputed implicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Sequence

from sleepmon.models import Achievement, AppData, Insight, SleepGoal, SleepSession
from sleepmon.analytics.metrics import MetricsSummary, summarize
from sleepmon.analytics.goals import default_goals, update_goals
from sleepmon.analytics.achievements import (
    default_achievements,
    evaluate_achievements,
    newly_unlocked,
)
from sleepmon.analytics.insights import generate_insights, recommendations


@dataclass
class RecomputeResult:
    """Everything the display layer consumes after a recompute."""

    goals: tuple[SleepGoal, ...]
    achievements: tuple[Achievement, ...]
    insights: list[Insight]
    recommendations: list[str]
    metrics: MetricsSummary
    unlocked: list[Achievement] = field(default_factory=list)  # this pass only

    def __repr__(self) -> str:
        return (
            f"RecomputeResult(goals={len(self.goals)}, "
            f"insights={len(self.insights)}, "
            f"new_unlocks={[a.id for a in self.unlocked]})"
        )


def recompute_all(
    sessions: Sequence[SleepSession],
    goals: Sequence[SleepGoal],
    achievements: Sequence[Achievement],
    now: datetime | None = None,
) -> RecomputeResult:
    """Recompute goals, achievements, insights and metrics from scratch.

    Args:
        sessions: Session history in insertion order.
        goals: Current goals; an empty sequence is seeded with the defaults.
        achievements: Current achievement state; an empty sequence is seeded
            with the locked catalog.
        now: Timestamp for any unlock in this pass (default: current UTC).

    Returns:
        A RecomputeResult.  The inputs are left untouched.
    """
    goals_in = tuple(goals) or default_goals()
    achievements_in = tuple(achievements) or default_achievements()

    new_goals = update_goals(sessions, goals_in)
    new_achievements = evaluate_achievements(sessions, achievements_in, now=now)

    return RecomputeResult(
        goals=new_goals,
        achievements=new_achievements,
        insights=generate_insights(sessions),
        recommendations=recommendations(sessions),
        metrics=summarize(sessions),
        unlocked=newly_unlocked(achievements_in, new_achievements),
    )


def refresh(
    data: AppData,
    now: datetime | None = None,
) -> tuple[AppData, RecomputeResult]:
    """Recompute on a snapshot and return the updated snapshot with the result."""
    result = recompute_all(data.sessions, data.goals, data.achievements, now=now)
    updated = replace(data, goals=result.goals, achievements=result.achievements)
    return updated, result
