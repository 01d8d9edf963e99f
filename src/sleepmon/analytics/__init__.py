"""Analytics engine for sleep session histories.

Modules:
    metrics      -- Rolling duration/quality means and the metrics summary
    streaks      -- Consecutive-day streaks and duration consistency (MAD)
    goals        -- Goal defaults, current values and progress
    achievements -- Achievement catalog and one-way unlock rules
    insights     -- Insight rules and sleep-hygiene recommendations
    engine       -- Recompute pipeline tying the above together
"""

from sleepmon.analytics.metrics import (
    NO_DATA,
    mean_duration,
    mean_quality,
    mean_absolute_deviation,
    quality_distribution,
    summarize,
    MetricsSummary,
)
from sleepmon.analytics.streaks import consecutive_days, duration_mad, is_consistent
from sleepmon.analytics.goals import (
    default_goals,
    update_goals,
    goal_progress,
    is_complete,
    set_goal_target,
)
from sleepmon.analytics.achievements import (
    default_achievements,
    evaluate_achievements,
    unlocked_count,
    RULES,
)
from sleepmon.analytics.insights import generate_insights, recommendations
from sleepmon.analytics.engine import recompute_all, refresh, RecomputeResult

__all__ = [
    # metrics
    "NO_DATA",
    "mean_duration",
    "mean_quality",
    "mean_absolute_deviation",
    "quality_distribution",
    "summarize",
    "MetricsSummary",
    # streaks
    "consecutive_days",
    "duration_mad",
    "is_consistent",
    # goals
    "default_goals",
    "update_goals",
    "goal_progress",
    "is_complete",
    "set_goal_target",
    # achievements
    "default_achievements",
    "evaluate_achievements",
    "unlocked_count",
    "RULES",
    # insights
    "generate_insights",
    "recommendations",
    # engine
    "recompute_all",
    "refresh",
    "RecomputeResult",
]
