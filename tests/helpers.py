"""Session builders shared by the sleepmon tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sleepmon.models import SleepSession


BASE_WAKE = datetime(2024, 3, 1, 7, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_session(
    day: int = 0,
    duration: int = 480,
    quality: int = 4,
    note: str = "",
    wake: datetime | None = None,
    session_id: str | None = None,
) -> SleepSession:
    """Build a session ending *day* days after BASE_WAKE.

    The start time is derived from *duration* so the record is consistent.
    """
    end = wake if wake is not None else BASE_WAKE + timedelta(days=day)
    return SleepSession(
        id=session_id or f"s{day}-{end.strftime('%H%M')}",
        start=end - timedelta(minutes=duration),
        end=end,
        duration=duration,
        quality=quality,
        note=note,
    )


def make_nightly(
    n: int,
    duration: int = 480,
    quality: int = 4,
    start_day: int = 0,
) -> list[SleepSession]:
    """*n* sessions on consecutive days with the same duration and quality."""
    return [
        make_session(day=start_day + i, duration=duration, quality=quality)
        for i in range(n)
    ]


def make_series(
    durations: list[int],
    qualities: list[int] | None = None,
    start_day: int = 0,
) -> list[SleepSession]:
    """Consecutive nightly sessions with the given durations (and qualities)."""
    if qualities is None:
        qualities = [4] * len(durations)
    assert len(qualities) == len(durations)
    return [
        make_session(day=start_day + i, duration=d, quality=q)
        for i, (d, q) in enumerate(zip(durations, qualities))
    ]
