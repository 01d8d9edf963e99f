"""Text formatting and icon glyphs for terminal output.

The analytics engine only deals in enums and minutes; this module is where
they turn into strings.
"""

from __future__ import annotations

from sleepmon.models import GoalType, InsightIcon, InsightType, SleepGoal


INSIGHT_TYPE_MARKERS = {
    InsightType.POSITIVE: "+",
    InsightType.WARNING: "!",
    InsightType.INFO: "i",
}

INSIGHT_ICONS = {
    InsightIcon.LIGHTBULB: "💡",
    InsightIcon.CLOCK: "🕒",
    InsightIcon.CHECK: "✅",
    InsightIcon.STAR: "⭐",
    InsightIcon.CALENDAR: "📅",
    InsightIcon.TRENDING_UP: "📈",
    InsightIcon.TRENDING_DOWN: "📉",
}

GOAL_ICONS = {
    GoalType.DURATION: "🕒",
    GoalType.QUALITY: "⭐",
    GoalType.CONSISTENCY: "📅",
    GoalType.STREAK: "🔥",
}

GOAL_TITLES = {
    GoalType.DURATION: "Average Sleep Duration",
    GoalType.QUALITY: "Average Sleep Quality",
    GoalType.CONSISTENCY: "Consistency Streak",
    GoalType.STREAK: "Current Streak",
}


def format_duration(minutes: float) -> str:
    """Minutes as ``"7h 30m"``."""
    hours = int(minutes // 60)
    mins = int(round(minutes - hours * 60))
    if mins == 60:
        hours, mins = hours + 1, 0
    return f"{hours}h {mins}m"


def format_hours(minutes: float, digits: int = 1) -> str:
    """Minutes as decimal hours, e.g. ``"7.5h"``."""
    return f"{minutes / 60.0:.{digits}f}h"


def goal_title(goal_type: GoalType) -> str:
    return GOAL_TITLES.get(goal_type, "Goal")


def _format_goal_amount(goal_type: GoalType, amount: float) -> str:
    if goal_type == GoalType.DURATION:
        return format_duration(amount)
    if goal_type == GoalType.QUALITY:
        return f"{amount:g}"
    return f"{amount:g} days"


def format_goal_value(goal: SleepGoal) -> str:
    return _format_goal_amount(goal.type, goal.current)


def format_goal_target(goal: SleepGoal) -> str:
    return _format_goal_amount(goal.type, goal.target)


def progress_bar(pct: float, width: int = 20) -> str:
    """ASCII bar; the bar itself is clipped at 100% even if *pct* is not."""
    filled = int(round(min(max(pct, 0.0), 100.0) / 100.0 * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"
