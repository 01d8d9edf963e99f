"""Achievement catalog and unlock rules.

The catalog is fixed: ten entries, each keyed by the id of a rule in
:data:`RULES`.  A rule is a pure predicate over the full session history;
rules never look at each other's state.

Unlocking is one-way.  An evaluation pass only ever flips ``unlocked``
from False to True and stamps the evaluation time, so running it again on
the same (or a longer) history changes nothing that is already unlocked.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Sequence

from sleepmon.models import Achievement, AchievementCategory, SleepSession
from sleepmon.analytics.metrics import last_n
from sleepmon.analytics.streaks import consecutive_days, is_consistent


Rule = Callable[[Sequence[SleepSession]], bool]

# Perfect-week duration band (minutes, inclusive)
PERFECT_MIN = 420
PERFECT_MAX = 540


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_CATALOG = [
    ("first_sleep", "First Night", "Log your first sleep session",
     "🌙", AchievementCategory.MILESTONE),
    ("week_streak", "Week Warrior", "Track sleep for 7 consecutive days",
     "🔥", AchievementCategory.STREAK),
    ("month_streak", "Monthly Master", "Track sleep for 30 consecutive days",
     "🏆", AchievementCategory.STREAK),
    ("perfect_week", "Perfect Week", "Get 7-9 hours of sleep for 7 days straight",
     "⭐", AchievementCategory.CONSISTENCY),
    ("quality_master", "Quality Master", "Achieve 5-star quality rating 5 times",
     "💎", AchievementCategory.QUALITY),
    ("early_bird", "Early Bird", "Log 10 sleep sessions",
     "🐦", AchievementCategory.MILESTONE),
    ("sleep_champion", "Sleep Champion", "Log 50 sleep sessions",
     "👑", AchievementCategory.MILESTONE),
    ("consistency_king", "Consistency King",
     "Maintain consistent sleep schedule for 14 days",
     "🎯", AchievementCategory.CONSISTENCY),
    ("quality_streak", "Quality Streak",
     "Get 4+ star rating for 10 consecutive sessions",
     "✨", AchievementCategory.QUALITY),
    ("hundred_club", "100 Club", "Log 100 sleep sessions",
     "💯", AchievementCategory.MILESTONE),
]


def default_achievements() -> tuple[Achievement, ...]:
    """The full catalog with every entry locked."""
    return tuple(
        Achievement(
            id=aid,
            title=title,
            description=description,
            icon=icon,
            category=category,
        )
        for aid, title, description, icon, category in _CATALOG
    )


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _session_count(minimum: int) -> Rule:
    return lambda sessions: len(sessions) >= minimum


def _streak(days: int) -> Rule:
    return lambda sessions: consecutive_days(sessions, target=days) >= days


def _quality_master(sessions: Sequence[SleepSession]) -> bool:
    return sum(1 for s in sessions if s.quality == 5) >= 5


def _perfect_week(sessions: Sequence[SleepSession]) -> bool:
    recent = last_n(sessions, 7)
    if len(recent) < 7:
        return False
    return all(PERFECT_MIN <= s.duration <= PERFECT_MAX for s in recent)


def _consistency_king(sessions: Sequence[SleepSession]) -> bool:
    return is_consistent(sessions, window=14, require_full=True)


def _quality_streak(sessions: Sequence[SleepSession]) -> bool:
    recent = last_n(sessions, 10)
    if len(recent) < 10:
        return False
    return all(s.quality >= 4 for s in recent)


RULES: dict[str, Rule] = {
    "first_sleep": _session_count(1),
    "early_bird": _session_count(10),
    "sleep_champion": _session_count(50),
    "hundred_club": _session_count(100),
    "quality_master": _quality_master,
    "week_streak": _streak(7),
    "month_streak": _streak(30),
    "perfect_week": _perfect_week,
    "consistency_king": _consistency_king,
    "quality_streak": _quality_streak,
}


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def evaluate_achievements(
    sessions: Sequence[SleepSession],
    achievements: Sequence[Achievement],
    now: datetime | None = None,
) -> tuple[Achievement, ...]:
    """Unlock every locked achievement whose rule now holds.

    Args:
        sessions: Full session history.
        achievements: Current achievement state.
        now: Unlock timestamp (default: current UTC time).

    Returns:
        A new tuple of achievements.  Entries already unlocked, and entries
        without a rule, are returned unchanged.
    """
    if len(sessions) == 0:
        return tuple(achievements)

    stamp = now if now is not None else datetime.now(timezone.utc)

    result: list[Achievement] = []
    for achievement in achievements:
        rule = RULES.get(achievement.id)
        if achievement.unlocked or rule is None or not rule(sessions):
            result.append(achievement)
        else:
            result.append(replace(achievement, unlocked=True, unlocked_at=stamp))
    return tuple(result)


def newly_unlocked(
    before: Sequence[Achievement],
    after: Sequence[Achievement],
) -> list[Achievement]:
    """Achievements unlocked in *after* that were locked in *before*."""
    was_unlocked = {a.id for a in before if a.unlocked}
    return [a for a in after if a.unlocked and a.id not in was_unlocked]


def unlocked_count(achievements: Sequence[Achievement]) -> int:
    return sum(1 for a in achievements if a.unlocked)
