"""Rolling duration/quality averages and the dashboard metrics summary.

Windows are taken from the tail of the session sequence in insertion
order, so "last 7" means the 7 most recently appended sessions.  Every
mean returns the :data:`NO_DATA` sentinel for an empty window instead of
dividing by zero.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Sequence

import numpy as np

from sleepmon.models import SleepSession


NO_DATA = 0.0

PRIMARY_WINDOW = 7  # sessions
TREND_WINDOW = 30

QUALITY_RATINGS = (1, 2, 3, 4, 5)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, e.g. ``round_half_up(2.25, 1) == 2.3``.

    Python's ``round`` uses banker's rounding; displayed values here follow
    the conventional rule instead.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def last_n(sessions: Sequence[SleepSession], n: int) -> list[SleepSession]:
    """The last *n* sessions (all of them if fewer exist)."""
    if n <= 0:
        return []
    return list(sessions[-n:])


def has_data(value: float | None) -> bool:
    return value is not None and value != NO_DATA


def mean_absolute_deviation(values: Sequence[float]) -> float:
    """Average absolute difference between each value and the mean."""
    if len(values) == 0:
        return NO_DATA
    arr = np.asarray(values, dtype=np.float64)
    return float(np.mean(np.abs(arr - np.mean(arr))))


# ---------------------------------------------------------------------------
# Rolling means
# ---------------------------------------------------------------------------


def mean_duration(
    sessions: Sequence[SleepSession],
    window: int | None = PRIMARY_WINDOW,
) -> float:
    """Mean duration (minutes) over the last *window* sessions.

    ``window=None`` averages the whole history.
    """
    recent = list(sessions) if window is None else last_n(sessions, window)
    if not recent:
        return NO_DATA
    return float(np.mean([s.duration for s in recent]))


def mean_quality(
    sessions: Sequence[SleepSession],
    window: int | None = PRIMARY_WINDOW,
) -> float:
    """Mean quality rating over the last *window* sessions."""
    recent = list(sessions) if window is None else last_n(sessions, window)
    if not recent:
        return NO_DATA
    return float(np.mean([s.quality for s in recent]))


def quality_distribution(sessions: Sequence[SleepSession]) -> dict[int, int]:
    """Number of sessions per quality rating (1-5)."""
    counts = {rating: 0 for rating in QUALITY_RATINGS}
    for s in sessions:
        if s.quality in counts:
            counts[s.quality] += 1
    return counts


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass
class MetricsSummary:
    """Headline numbers for the dashboard and analytics views."""

    session_count: int = 0
    total_minutes: int = 0
    last_duration: int | None = None  # most recently appended session

    # 7-session window
    avg_duration_7d: float = NO_DATA
    avg_quality_7d: float = NO_DATA

    # 30-session window (trend comparison)
    avg_duration_30d: float = NO_DATA

    # Whole history
    avg_duration_all: float = NO_DATA
    avg_quality_all: float = NO_DATA

    quality_distribution: dict[int, int] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.session_count > 0

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        d = asdict(self)
        d["quality_distribution"] = {
            str(k): v for k, v in self.quality_distribution.items()
        }
        d["total_hours"] = round(self.total_hours, 1)
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"MetricsSummary(sessions={self.session_count}, "
            f"avg7={self.avg_duration_7d:.0f}min, "
            f"q7={self.avg_quality_7d:.1f}, "
            f"total={self.total_hours:.1f}h)"
        )


def summarize(sessions: Sequence[SleepSession]) -> MetricsSummary:
    """Compute the metrics summary for a session history."""
    if len(sessions) == 0:
        return MetricsSummary(quality_distribution=quality_distribution([]))

    return MetricsSummary(
        session_count=len(sessions),
        total_minutes=int(sum(s.duration for s in sessions)),
        last_duration=sessions[-1].duration,
        avg_duration_7d=round(mean_duration(sessions, PRIMARY_WINDOW), 2),
        avg_quality_7d=round(mean_quality(sessions, PRIMARY_WINDOW), 2),
        avg_duration_30d=round(mean_duration(sessions, TREND_WINDOW), 2),
        avg_duration_all=round(mean_duration(sessions, None), 2),
        avg_quality_all=round(mean_quality(sessions, None), 2),
        quality_distribution=quality_distribution(sessions),
    )
