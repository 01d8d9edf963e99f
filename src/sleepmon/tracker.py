"""Session lifecycle: start/stop tracking, manual entry and deletion.

These are the only operations that change the session list.  Each takes
an :class:`AppData` snapshot and returns a new one; the caller is expected
to run :func:`sleepmon.analytics.engine.refresh` afterwards.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from sleepmon.models import AppData, SleepSession


MIN_QUALITY = 1
MAX_QUALITY = 5
DEFAULT_QUALITY = 3


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now().astimezone()


def _check_quality(quality: int) -> None:
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValueError(
            f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from *start* to *end* (floored, never negative)."""
    seconds = (end - start).total_seconds()
    return max(int(seconds // 60), 0)


def start_session(data: AppData, now: datetime | None = None) -> AppData:
    """Begin tracking a session at *now*.

    Raises:
        ValueError: If a session is already in progress.
    """
    if data.current_start is not None:
        raise ValueError(
            f"a session is already in progress (started {data.current_start.isoformat()})"
        )
    return replace(data, current_start=_now(now))


def end_session(
    data: AppData,
    quality: int = DEFAULT_QUALITY,
    note: str = "",
    now: datetime | None = None,
) -> AppData:
    """Finish the in-progress session and append it to the history.

    The session id is the end time in epoch milliseconds.

    Raises:
        ValueError: If nothing is in progress or *quality* is out of range.
    """
    if data.current_start is None:
        raise ValueError("no session in progress")
    _check_quality(quality)

    end = _now(now)
    session = SleepSession(
        id=str(int(end.timestamp() * 1000)),
        start=data.current_start,
        end=end,
        duration=elapsed_minutes(data.current_start, end),
        quality=quality,
        note=note,
    )
    return replace(data, sessions=data.sessions + (session,), current_start=None)


def log_session(
    data: AppData,
    start: datetime,
    end: datetime,
    quality: int = DEFAULT_QUALITY,
    note: str = "",
    session_id: str | None = None,
) -> AppData:
    """Append a completed session entered after the fact.

    Raises:
        ValueError: If *end* precedes *start*, *quality* is out of range or
            *session_id* is already taken.
    """
    if end < start:
        raise ValueError("session end is before its start")
    _check_quality(quality)

    sid = session_id if session_id is not None else str(int(end.timestamp() * 1000))
    if any(s.id == sid for s in data.sessions):
        raise ValueError(f"duplicate session id: {sid!r}")

    session = SleepSession(
        id=sid,
        start=start,
        end=end,
        duration=elapsed_minutes(start, end),
        quality=quality,
        note=note,
    )
    return replace(data, sessions=data.sessions + (session,))


def delete_session(data: AppData, session_id: str) -> AppData:
    """Remove a session by id.

    Raises:
        ValueError: If no session has that id.
    """
    remaining = tuple(s for s in data.sessions if s.id != session_id)
    if len(remaining) == len(data.sessions):
        raise ValueError(f"unknown session id: {session_id!r}")
    return replace(data, sessions=remaining)
