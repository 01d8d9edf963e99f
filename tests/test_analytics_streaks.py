"""Tests for sleepmon.analytics.streaks -- day streaks and consistency."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from sleepmon.analytics.streaks import (
    CONSISTENCY_THRESHOLD_MIN,
    consecutive_days,
    duration_mad,
    is_consistent,
)

from helpers import BASE_WAKE, make_nightly, make_series, make_session


class TestConsecutiveDays:
    def test_empty(self):
        assert consecutive_days([]) == 0

    def test_single_session(self):
        assert consecutive_days([make_session()]) == 1

    def test_consecutive_nights(self):
        assert consecutive_days(make_nightly(5)) == 5

    def test_gap_stops_streak(self):
        sessions = make_nightly(3) + make_nightly(4, start_day=5)
        # days 5..8 are consecutive; the gap before day 5 ends the walk
        assert consecutive_days(sessions) == 4

    def test_input_order_does_not_matter(self):
        sessions = make_nightly(6)
        shuffled = sessions[:]
        random.Random(7).shuffle(shuffled)
        assert consecutive_days(shuffled) == 6
        assert consecutive_days(list(reversed(sessions))) == 6

    def test_same_day_nap_is_neutral(self):
        sessions = make_nightly(3)
        nap = make_session(wake=BASE_WAKE + timedelta(days=1, hours=8), duration=30)
        assert consecutive_days(sessions + [nap]) == 3

    def test_two_sessions_on_latest_day(self):
        sessions = make_nightly(2)
        nap = make_session(wake=BASE_WAKE + timedelta(days=1, hours=7), duration=45)
        assert consecutive_days(sessions + [nap]) == 2

    def test_time_of_day_is_ignored(self):
        # 23:50 one day and 00:10 the next are one calendar day apart
        late = make_session(wake=datetime(2024, 3, 1, 23, 50, tzinfo=timezone.utc))
        early = make_session(wake=datetime(2024, 3, 2, 0, 10, tzinfo=timezone.utc))
        assert consecutive_days([late, early]) == 2

    def test_local_calendar_day_across_offsets(self, local_tz):
        local_tz("Asia/Tokyo")
        # 07:00 Tokyo time on consecutive mornings, one stored in UTC
        stored_utc = make_session(wake=datetime(2024, 3, 1, 22, 0, tzinfo=timezone.utc))
        stored_jst = make_session(
            wake=datetime(2024, 3, 3, 7, 0, tzinfo=timezone(timedelta(hours=9)))
        )
        assert consecutive_days([stored_utc, stored_jst]) == 2

    def test_stale_history_still_counts_from_latest(self):
        # Streak is anchored at the latest session, not at "today"
        assert consecutive_days(make_nightly(4, start_day=-100)) == 4

    def test_target_stops_early(self):
        sessions = make_nightly(20)
        assert consecutive_days(sessions, target=7) == 7

    def test_target_not_reached(self):
        sessions = make_nightly(3)
        assert consecutive_days(sessions, target=7) == 3

    def test_adding_next_day_increments(self):
        sessions = make_nightly(9)
        before = consecutive_days(sessions)
        after = consecutive_days(sessions + [make_session(day=9)])
        assert after == before + 1

    def test_adding_next_day_after_gap(self):
        sessions = make_nightly(2) + make_nightly(3, start_day=10)
        before = consecutive_days(sessions)
        after = consecutive_days(sessions + [make_session(day=13)])
        assert (before, after) == (3, 4)


class TestDurationMAD:
    def test_empty(self):
        assert duration_mad([]) == 0.0

    def test_constant(self):
        assert duration_mad(make_nightly(7)) == 0.0

    def test_uses_trailing_window(self):
        sessions = make_series([100, 900] + [480] * 7)
        assert duration_mad(sessions, window=7) == 0.0

    def test_known_value(self):
        sessions = make_series([420, 540] * 3 + [480])
        # mean 480, deviations 60 x6 and 0 → 360/7
        assert duration_mad(sessions) == pytest.approx(360 / 7)


class TestIsConsistent:
    def test_empty_is_not_consistent(self):
        assert not is_consistent([])

    def test_steady_schedule(self):
        assert is_consistent(make_series([470, 490, 480, 485, 475, 480, 480]))

    def test_erratic_schedule(self):
        assert not is_consistent(make_series([300, 600] * 4))

    def test_threshold_is_strict(self):
        sessions = make_series([420, 540])  # MAD exactly 60
        assert duration_mad(sessions) == CONSISTENCY_THRESHOLD_MIN
        assert not is_consistent(sessions)

    def test_require_full_window(self):
        sessions = make_nightly(5)
        assert is_consistent(sessions, window=7)
        assert not is_consistent(sessions, window=7, require_full=True)
