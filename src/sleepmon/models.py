"""Record types shared by the analytics engine, the tracker and the store.

All records are frozen dataclasses.  Operations never mutate a record in
place; they build a new one with :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class GoalType(str, Enum):
    """The four fixed goal kinds."""

    DURATION = "duration"
    QUALITY = "quality"
    CONSISTENCY = "consistency"
    STREAK = "streak"


class InsightType(str, Enum):
    """Tone of an insight card."""

    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"


class InsightIcon(str, Enum):
    """Icon reference carried by an insight; resolved in :mod:`sleepmon.display`."""

    LIGHTBULB = "lightbulb"
    CLOCK = "clock"
    CHECK = "check"
    STAR = "star"
    CALENDAR = "calendar"
    TRENDING_UP = "trending_up"
    TRENDING_DOWN = "trending_down"


class AchievementCategory(str, Enum):
    MILESTONE = "milestone"
    STREAK = "streak"
    QUALITY = "quality"
    CONSISTENCY = "consistency"


@dataclass(frozen=True)
class SleepSession:
    """One recorded sleep interval."""

    id: str
    start: datetime
    end: datetime
    duration: int  # minutes
    quality: int  # 1-5
    note: str = ""

    @property
    def hours(self) -> float:
        return self.duration / 60.0

    def __repr__(self) -> str:
        return (
            f"SleepSession({self.id}: {self.end.date().isoformat()}, "
            f"{self.duration}min, q={self.quality})"
        )


@dataclass(frozen=True)
class RoutineItem:
    id: str
    title: str
    completed: bool = False


@dataclass(frozen=True)
class SleepGoal:
    """A target for one goal type; ``current`` is always derived."""

    id: str
    type: GoalType
    target: float
    current: float = 0.0
    unit: str = ""


@dataclass(frozen=True)
class Achievement:
    """One entry of the fixed achievement catalog."""

    id: str
    title: str
    description: str
    icon: str
    category: AchievementCategory
    unlocked: bool = False
    unlocked_at: datetime | None = None


@dataclass(frozen=True)
class Insight:
    """A transient, human-readable observation about recent sleep."""

    type: InsightType
    title: str
    description: str
    icon: InsightIcon

    def __repr__(self) -> str:
        return f"Insight({self.type.value}: {self.title})"


@dataclass(frozen=True)
class AppData:
    """Snapshot of everything the app keeps in local storage."""

    sessions: tuple[SleepSession, ...] = ()
    routine_items: tuple[RoutineItem, ...] = ()
    current_start: datetime | None = None  # in-progress session start
    goals: tuple[SleepGoal, ...] = ()
    achievements: tuple[Achievement, ...] = ()
