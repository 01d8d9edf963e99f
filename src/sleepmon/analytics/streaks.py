"""Consecutive-day streaks and duration consistency.

A streak counts local calendar days (by session end date, time of day dropped)
that each have at least one session ending on them, walking backwards
from the most recent session.  Several sessions ending on the same day
(a nap, say) neither break nor extend the streak.

Consistency is the mean absolute deviation (MAD) of duration over a
trailing window of sessions.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from sleepmon.models import SleepSession
from sleepmon.analytics.metrics import last_n, mean_absolute_deviation, NO_DATA


CONSISTENCY_WINDOW = 7  # sessions
CONSISTENCY_THRESHOLD_MIN = 60.0  # MAD below this → consistent


def _end_day(session: SleepSession) -> date:
    return session.end.astimezone().date()


def consecutive_days(
    sessions: Sequence[SleepSession],
    target: int | None = None,
) -> int:
    """Length of the day streak ending at the most recent session.

    Args:
        sessions: Session history in any order; it is sorted by end time here.
        target: Stop counting once the streak reaches this value.  ``None``
            walks the whole history.

    Returns:
        0 for an empty history, otherwise the streak length (>= 1).
    """
    if len(sessions) == 0:
        return 0

    ordered = sorted(sessions, key=lambda s: s.end, reverse=True)

    streak = 1
    anchor = _end_day(ordered[0])

    for session in ordered[1:]:
        day = _end_day(session)
        gap = (anchor - day).days

        if gap == 1:
            streak += 1
            anchor = day
            if target is not None and streak >= target:
                break
        elif gap > 1:
            break
        # gap == 0: same day, keep walking

    return streak


def duration_mad(
    sessions: Sequence[SleepSession],
    window: int = CONSISTENCY_WINDOW,
) -> float:
    """MAD of duration (minutes) over the last *window* sessions."""
    recent = last_n(sessions, window)
    if not recent:
        return NO_DATA
    return mean_absolute_deviation([s.duration for s in recent])


def is_consistent(
    sessions: Sequence[SleepSession],
    window: int = CONSISTENCY_WINDOW,
    threshold: float = CONSISTENCY_THRESHOLD_MIN,
    require_full: bool = False,
) -> bool:
    """True when duration MAD over the window is below *threshold*.

    With ``require_full`` the window must hold exactly *window* sessions,
    otherwise a short history is never considered consistent.
    """
    recent = last_n(sessions, window)
    if not recent:
        return False
    if require_full and len(recent) < window:
        return False
    return duration_mad(recent, window) < threshold
