"""Insight and recommendation generation.

Insights come from four rule groups evaluated in a fixed order (duration,
quality, consistency, trend) and the list is capped at :data:`MAX_INSIGHTS`.
All rules look at the tail of the history in insertion order.

Thresholds (minutes unless noted):

    duration   < 420 warning | 420-540 positive | > 540 info
    quality    < 3 warning   | >= 4 positive    | 3 <= q < 4 no insight
    consistency  MAD > 90 info, else positive (needs >= 5 of last 7)
    trend      recent-7 vs previous-7 mean, +/- 30 (needs >= 14 of last 30)
"""

from __future__ import annotations

from typing import Sequence

from sleepmon.models import Insight, InsightIcon, InsightType, SleepSession
from sleepmon.analytics.metrics import (
    PRIMARY_WINDOW,
    TREND_WINDOW,
    last_n,
    mean_absolute_deviation,
    mean_duration,
    mean_quality,
    round_half_up,
)


MAX_INSIGHTS = 6
MAX_RECOMMENDATIONS = 8

DURATION_LOW_MIN = 420  # 7 h
DURATION_HIGH_MIN = 540  # 9 h
QUALITY_LOW = 3.0
QUALITY_HIGH = 4.0

CONSISTENCY_MIN_SESSIONS = 5
CONSISTENCY_MAD_LIMIT = 90.0  # 1.5 h

TREND_MIN_SESSIONS = 14
TREND_DELTA_MIN = 30.0

ONBOARDING = Insight(
    type=InsightType.INFO,
    title="Start Tracking Your Sleep",
    description=(
        "Begin logging your sleep sessions to receive personalized "
        "insights and recommendations."
    ),
    icon=InsightIcon.LIGHTBULB,
)

GENERAL_TIPS = (
    "Maintain a consistent sleep schedule, even on weekends",
    "Create a relaxing bedtime routine 30-60 minutes before sleep",
    "Keep your bedroom cool, dark, and quiet",
    "Avoid screens and blue light 1-2 hours before bedtime",
    "Limit caffeine intake after 2 PM",
    "Get regular exercise, but not close to bedtime",
    "Avoid large meals and alcohol before bed",
    "Use your bed only for sleep (not work or entertainment)",
)

SHORT_SLEEP_TIPS = (
    "Set a bedtime alarm to remind you to start winding down",
    "Try gradually moving your bedtime 15 minutes earlier each week",
)

LOW_QUALITY_TIPS = (
    "Consider using relaxation techniques like deep breathing or meditation",
    "Evaluate your mattress and pillow - they should be comfortable and supportive",
)


# ---------------------------------------------------------------------------
# Rule groups
# ---------------------------------------------------------------------------


def _duration_insight(avg_duration: float) -> Insight:
    hours = avg_duration / 60.0
    if avg_duration < DURATION_LOW_MIN:
        return Insight(
            type=InsightType.WARNING,
            title="Increase Sleep Duration",
            description=(
                f"Your average sleep is {hours:.1f} hours. Adults need 7-9 hours "
                f"for optimal health. Try going to bed 30 minutes earlier."
            ),
            icon=InsightIcon.CLOCK,
        )
    if avg_duration <= DURATION_HIGH_MIN:
        return Insight(
            type=InsightType.POSITIVE,
            title="Great Sleep Duration!",
            description=(
                f"You're averaging {hours:.1f} hours of sleep, which is in the "
                f"optimal range of 7-9 hours. Keep it up!"
            ),
            icon=InsightIcon.CHECK,
        )
    return Insight(
        type=InsightType.INFO,
        title="Consider Sleep Quality",
        description=(
            f"You're sleeping {hours:.1f} hours on average. If you still feel "
            f"tired, focus on improving sleep quality rather than duration."
        ),
        icon=InsightIcon.STAR,
    )


def _quality_insight(avg_quality: float) -> Insight | None:
    if avg_quality < QUALITY_LOW:
        return Insight(
            type=InsightType.WARNING,
            title="Improve Sleep Quality",
            description=(
                f"Your average sleep quality is {avg_quality:.1f}/5. Try "
                f"establishing a consistent bedtime routine and creating a "
                f"comfortable sleep environment."
            ),
            icon=InsightIcon.STAR,
        )
    if avg_quality >= QUALITY_HIGH:
        return Insight(
            type=InsightType.POSITIVE,
            title="Excellent Sleep Quality!",
            description=(
                f"Your sleep quality rating is {avg_quality:.1f}/5. Whatever "
                f"you're doing is working great!"
            ),
            icon=InsightIcon.STAR,
        )
    return None


def _consistency_insight(recent: Sequence[SleepSession]) -> Insight | None:
    if len(recent) < CONSISTENCY_MIN_SESSIONS:
        return None
    mad = mean_absolute_deviation([s.duration for s in recent])
    if mad > CONSISTENCY_MAD_LIMIT:
        return Insight(
            type=InsightType.INFO,
            title="Improve Sleep Consistency",
            description=(
                "Your sleep duration varies significantly. Try to go to bed and "
                "wake up at the same time each day for better sleep quality."
            ),
            icon=InsightIcon.CALENDAR,
        )
    return Insight(
        type=InsightType.POSITIVE,
        title="Consistent Sleep Schedule",
        description=(
            "You maintain a consistent sleep schedule! This helps regulate "
            "your circadian rhythm."
        ),
        icon=InsightIcon.CHECK,
    )


def _trend_insight(sessions: Sequence[SleepSession]) -> Insight | None:
    window = last_n(sessions, TREND_WINDOW)
    if len(window) < TREND_MIN_SESSIONS:
        return None
    previous = window[-2 * PRIMARY_WINDOW:-PRIMARY_WINDOW]
    if len(previous) < PRIMARY_WINDOW:
        return None

    recent_avg = mean_duration(window, PRIMARY_WINDOW)
    prev_avg = mean_duration(previous, None)

    if recent_avg > prev_avg + TREND_DELTA_MIN:
        delta_h = round_half_up((recent_avg - prev_avg) / 60.0, 1)
        return Insight(
            type=InsightType.POSITIVE,
            title="Improving Sleep Duration",
            description=(
                f"Your sleep has increased by {delta_h:g} hours compared to the "
                f"previous week. Great progress!"
            ),
            icon=InsightIcon.TRENDING_UP,
        )
    if recent_avg < prev_avg - TREND_DELTA_MIN:
        delta_h = round_half_up((prev_avg - recent_avg) / 60.0, 1)
        return Insight(
            type=InsightType.WARNING,
            title="Declining Sleep Duration",
            description=(
                f"Your sleep has decreased by {delta_h:g} hours compared to the "
                f"previous week. Try to prioritize rest."
            ),
            icon=InsightIcon.TRENDING_DOWN,
        )
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_insights(sessions: Sequence[SleepSession]) -> list[Insight]:
    """Build the ordered insight list for a session history.

    An empty history yields only the onboarding insight.
    """
    if len(sessions) == 0:
        return [ONBOARDING]

    recent = last_n(sessions, PRIMARY_WINDOW)
    avg_duration = mean_duration(sessions, PRIMARY_WINDOW)
    avg_quality = mean_quality(sessions, PRIMARY_WINDOW)

    candidates = [
        _duration_insight(avg_duration),
        _quality_insight(avg_quality),
        _consistency_insight(recent),
        _trend_insight(sessions),
    ]
    insights = [i for i in candidates if i is not None]
    return insights[:MAX_INSIGHTS]


def recommendations(sessions: Sequence[SleepSession]) -> list[str]:
    """General sleep-hygiene tips, led by personalized ones when warranted.

    An empty history averages to the NO_DATA sentinel, which falls under both
    thresholds, so a new user is shown the short-sleep and low-quality tips.
    """
    personalized: list[str] = []

    if mean_duration(sessions, PRIMARY_WINDOW) < DURATION_LOW_MIN:
        personalized.extend(SHORT_SLEEP_TIPS)
    if mean_quality(sessions, PRIMARY_WINDOW) < QUALITY_LOW:
        personalized.extend(LOW_QUALITY_TIPS)

    return (personalized + list(GENERAL_TIPS))[:MAX_RECOMMENDATIONS]
