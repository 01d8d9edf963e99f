"""Goal progress tracking.

Each of the four goal types maps onto one metric of the session history.
``current`` is overwritten on every recompute; only ``target`` is ever set
by the user.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from sleepmon.models import GoalType, SleepGoal, SleepSession
from sleepmon.analytics.metrics import (
    PRIMARY_WINDOW,
    mean_duration,
    mean_quality,
    round_half_up,
)
from sleepmon.analytics.streaks import consecutive_days


PROGRESS_CAP = 100.0

# Quality progress is reported uncapped and may exceed 100%.
UNCAPPED_TYPES = frozenset({GoalType.QUALITY})


def default_goals() -> tuple[SleepGoal, ...]:
    """The starting goal set: one goal per type."""
    return (
        SleepGoal(id="1", type=GoalType.DURATION, target=480, unit="minutes"),
        SleepGoal(id="2", type=GoalType.QUALITY, target=4, unit="rating"),
        SleepGoal(id="3", type=GoalType.CONSISTENCY, target=7, unit="days"),
        SleepGoal(id="4", type=GoalType.STREAK, target=7, unit="days"),
    )


def current_values(sessions: Sequence[SleepSession]) -> dict[GoalType, float]:
    """Derived ``current`` value for every goal type."""
    streak = consecutive_days(sessions)
    return {
        GoalType.DURATION: round_half_up(mean_duration(sessions, PRIMARY_WINDOW)),
        GoalType.QUALITY: round_half_up(mean_quality(sessions, PRIMARY_WINDOW), 1),
        GoalType.CONSISTENCY: float(streak),
        GoalType.STREAK: float(streak),
    }


def update_goals(
    sessions: Sequence[SleepSession],
    goals: Sequence[SleepGoal],
) -> tuple[SleepGoal, ...]:
    """Recompute ``current`` for every goal.

    An empty history leaves the goals exactly as they were.
    """
    if len(sessions) == 0:
        return tuple(goals)

    values = current_values(sessions)
    return tuple(
        replace(goal, current=values[goal.type]) if goal.type in values else goal
        for goal in goals
    )


def goal_progress(goal: SleepGoal) -> float:
    """Progress towards the target in percent.

    Capped at 100 for every type except quality.
    """
    if goal.target <= 0:
        return 0.0
    pct = goal.current / goal.target * 100.0
    if goal.type in UNCAPPED_TYPES:
        return pct
    return min(pct, PROGRESS_CAP)


def is_complete(goal: SleepGoal) -> bool:
    return goal.current >= goal.target


def set_goal_target(
    goals: Sequence[SleepGoal],
    goal_id: str,
    target: float,
) -> tuple[SleepGoal, ...]:
    """Return the goals with *goal_id*'s target replaced.

    Raises:
        ValueError: If no goal has that id.
    """
    if not any(g.id == goal_id for g in goals):
        raise ValueError(f"unknown goal id: {goal_id!r}")
    return tuple(
        replace(g, target=target) if g.id == goal_id else g for g in goals
    )
