"""JSON persistence for :class:`AppData` snapshots.

The document layout matches what the browser app keeps in local storage::

    {
      "sleepSessions":  [{"id", "startTime", "endTime", "duration", "quality", "notes"}],
      "routineItems":   [{"id", "title", "completed"}],
      "currentSession": {"startTime"} | null,
      "goals":          [{"id", "type", "target", "current", "unit"}],
      "achievements":   [{"id", "title", "description", "icon", "unlocked",
                          "unlockedDate"?, "category"}]
    }

Timestamps are ISO-8601 strings.  Records that fail validation raise
ValueError naming the offending list and index.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from sleepmon.models import (
    Achievement,
    AchievementCategory,
    AppData,
    GoalType,
    RoutineItem,
    SleepGoal,
    SleepSession,
)
from sleepmon.analytics.goals import default_goals
from sleepmon.analytics.achievements import default_achievements
from sleepmon.routine import default_routine


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC.

    Values without an offset are local wall-clock time and come back
    offset-aware, so stored and freshly entered times always compare.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.astimezone()


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


# ---------------------------------------------------------------------------
# Record codecs
# ---------------------------------------------------------------------------


def session_to_dict(session: SleepSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "startTime": format_timestamp(session.start),
        "endTime": format_timestamp(session.end),
        "duration": session.duration,
        "quality": session.quality,
        "notes": session.note,
    }


def session_from_dict(d: dict[str, Any]) -> SleepSession:
    """Build a SleepSession from its stored form.

    Raises:
        ValueError: On missing fields, unparsable timestamps, a negative
            duration or a quality outside 1-5.
    """
    try:
        session = SleepSession(
            id=str(d["id"]),
            start=parse_timestamp(d["startTime"]),
            end=parse_timestamp(d["endTime"]),
            duration=int(d["duration"]),
            quality=int(d["quality"]),
            note=d.get("notes", "") or "",
        )
    except KeyError as e:
        raise ValueError(f"missing field {e.args[0]!r}") from e
    except (TypeError, AttributeError) as e:
        raise ValueError(str(e)) from e

    if session.duration < 0:
        raise ValueError(f"negative duration {session.duration}")
    if not 1 <= session.quality <= 5:
        raise ValueError(f"quality {session.quality} outside 1-5")
    return session


def goal_to_dict(goal: SleepGoal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "type": goal.type.value,
        "target": goal.target,
        "current": goal.current,
        "unit": goal.unit,
    }


def goal_from_dict(d: dict[str, Any]) -> SleepGoal:
    try:
        return SleepGoal(
            id=str(d["id"]),
            type=GoalType(d["type"]),
            target=float(d["target"]),
            current=float(d.get("current", 0.0)),
            unit=d.get("unit", ""),
        )
    except KeyError as e:
        raise ValueError(f"missing field {e.args[0]!r}") from e
    except (TypeError, AttributeError) as e:
        raise ValueError(str(e)) from e


def achievement_to_dict(achievement: Achievement) -> dict[str, Any]:
    d = {
        "id": achievement.id,
        "title": achievement.title,
        "description": achievement.description,
        "icon": achievement.icon,
        "unlocked": achievement.unlocked,
        "category": achievement.category.value,
    }
    if achievement.unlocked_at is not None:
        d["unlockedDate"] = format_timestamp(achievement.unlocked_at)
    return d


def achievement_from_dict(d: dict[str, Any]) -> Achievement:
    try:
        unlocked_date = d.get("unlockedDate")
        return Achievement(
            id=str(d["id"]),
            title=d["title"],
            description=d.get("description", ""),
            icon=d.get("icon", ""),
            category=AchievementCategory(d["category"]),
            unlocked=bool(d.get("unlocked", False)),
            unlocked_at=parse_timestamp(unlocked_date) if unlocked_date else None,
        )
    except KeyError as e:
        raise ValueError(f"missing field {e.args[0]!r}") from e
    except (TypeError, AttributeError) as e:
        raise ValueError(str(e)) from e


def routine_item_to_dict(item: RoutineItem) -> dict[str, Any]:
    return {"id": item.id, "title": item.title, "completed": item.completed}


def routine_item_from_dict(d: dict[str, Any]) -> RoutineItem:
    try:
        return RoutineItem(
            id=str(d["id"]),
            title=d["title"],
            completed=bool(d.get("completed", False)),
        )
    except KeyError as e:
        raise ValueError(f"missing field {e.args[0]!r}") from e
    except (TypeError, AttributeError) as e:
        raise ValueError(str(e)) from e


# ---------------------------------------------------------------------------
# Snapshot codec
# ---------------------------------------------------------------------------


def _decode_list(raw: dict[str, Any], key: str, decode) -> tuple:
    items = []
    for i, entry in enumerate(raw.get(key) or []):
        try:
            items.append(decode(entry))
        except ValueError as e:
            raise ValueError(f"{key}[{i}]: {e}") from e
    return tuple(items)


def app_data_to_dict(data: AppData) -> dict[str, Any]:
    return {
        "sleepSessions": [session_to_dict(s) for s in data.sessions],
        "routineItems": [routine_item_to_dict(i) for i in data.routine_items],
        "currentSession": (
            {"startTime": format_timestamp(data.current_start)}
            if data.current_start is not None else None
        ),
        "goals": [goal_to_dict(g) for g in data.goals],
        "achievements": [achievement_to_dict(a) for a in data.achievements],
    }


def app_data_from_dict(raw: dict[str, Any]) -> AppData:
    """Decode a stored document into a snapshot.

    Raises:
        ValueError: If any record is invalid.
    """
    current = raw.get("currentSession")
    try:
        current_start = parse_timestamp(current["startTime"]) if current else None
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ValueError(f"currentSession: {e}") from e

    return AppData(
        sessions=_decode_list(raw, "sleepSessions", session_from_dict),
        routine_items=_decode_list(raw, "routineItems", routine_item_from_dict),
        current_start=current_start,
        goals=_decode_list(raw, "goals", goal_from_dict),
        achievements=_decode_list(raw, "achievements", achievement_from_dict),
    )


def new_app_data() -> AppData:
    """A fresh snapshot: default routine, goals and locked achievements."""
    return AppData(
        routine_items=default_routine(),
        goals=default_goals(),
        achievements=default_achievements(),
    )


def load_app_data(path: str | Path) -> AppData:
    """Load a snapshot from *path*; a missing file gives :func:`new_app_data`.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid records.
    """
    p = Path(path)
    if not p.exists():
        return new_app_data()

    with open(p, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{p.name}: invalid JSON ({e})") from e

    if not isinstance(raw, dict):
        raise ValueError(f"{p.name}: expected a JSON object")
    return app_data_from_dict(raw)


def save_app_data(path: str | Path, data: AppData, indent: int = 2) -> Path:
    """Write a snapshot to *path* as JSON, creating parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(app_data_to_dict(data), f, indent=indent, ensure_ascii=False)
        f.write("\n")
    return p
