"""Bedtime routine checklist."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from sleepmon.models import RoutineItem


DEFAULT_ROUTINE = (
    "Brush teeth",
    "Take a warm shower",
    "Read for 15 minutes",
    "Dim the lights",
    "Set phone to Do Not Disturb",
)


def default_routine() -> tuple[RoutineItem, ...]:
    return tuple(
        RoutineItem(id=str(i), title=title)
        for i, title in enumerate(DEFAULT_ROUTINE, 1)
    )


def routine_progress(items: Sequence[RoutineItem]) -> float:
    """Percent of items completed (0.0 for an empty routine)."""
    if len(items) == 0:
        return 0.0
    done = sum(1 for item in items if item.completed)
    return done / len(items) * 100.0


def add_item(items: Sequence[RoutineItem], title: str) -> tuple[RoutineItem, ...]:
    """Append an item; blank titles are rejected with ValueError."""
    title = title.strip()
    if not title:
        raise ValueError("routine item title is empty")
    next_id = max((int(i.id) for i in items if i.id.isdigit()), default=0) + 1
    return tuple(items) + (RoutineItem(id=str(next_id), title=title),)


def toggle_item(items: Sequence[RoutineItem], item_id: str) -> tuple[RoutineItem, ...]:
    if not any(i.id == item_id for i in items):
        raise ValueError(f"unknown routine item id: {item_id!r}")
    return tuple(
        replace(i, completed=not i.completed) if i.id == item_id else i
        for i in items
    )


def remove_item(items: Sequence[RoutineItem], item_id: str) -> tuple[RoutineItem, ...]:
    remaining = tuple(i for i in items if i.id != item_id)
    if len(remaining) == len(items):
        raise ValueError(f"unknown routine item id: {item_id!r}")
    return remaining


def reset_routine(items: Sequence[RoutineItem]) -> tuple[RoutineItem, ...]:
    """Uncheck every item (start of a new night)."""
    return tuple(replace(i, completed=False) for i in items)
