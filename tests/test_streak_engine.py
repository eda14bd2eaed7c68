"""Tests for streak and completion-rate calculations.

Covers:
- Empty input and schedules starting in the future
- "Today" leniency versus misses in the past
- Weekday, three-per-week and custom-day schedules
- Completions on days the schedule does not expect
- Completion rate rounding and the vacuous 100% case
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from habitloop.domain.schedule import ScheduleDescriptor
from habitloop.errors import MalformedDay
from habitloop.services.streaks import (
    StreakResult,
    completion_rate,
    compute_completion_stats,
    compute_streaks,
)

MONDAY = date(2024, 1, 1)
DAILY = ScheduleDescriptor.daily()
WEEKDAYS = ScheduleDescriptor.from_frequency("weekdays")
THREE_PER_WEEK = ScheduleDescriptor.from_frequency("3x/week")


def day(n: int) -> date:
    """Day ``n`` of January 2024 (day(1) is Monday)."""
    return date(2024, 1, n)


class TestComputeStreaks:
    def test_no_completions_returns_zero(self):
        assert compute_streaks(DAILY, day(1), [], now=day(10)) == StreakResult(0, 0)

    def test_future_start_returns_zero(self):
        result = compute_streaks(DAILY, day(10), [day(10), day(11)], now=day(5))
        assert result == StreakResult(0, 0)

    def test_today_missing_does_not_break_streak(self):
        completions = [day(n) for n in range(1, 5)]
        result = compute_streaks(DAILY, day(1), completions, now=day(5))
        assert result.current_streak == 4
        assert result.longest_streak == 4

    def test_today_completed_extends_streak(self):
        completions = [day(n) for n in range(1, 6)]
        assert compute_streaks(DAILY, day(1), completions, now=day(5)).current_streak == 5

    def test_past_miss_breaks_streak(self):
        completions = [day(1), day(2), day(3), day(5), day(6)]
        result = compute_streaks(DAILY, day(1), completions, now=day(6))
        assert result == StreakResult(current_streak=2, longest_streak=3)

    def test_miss_yesterday_resets_current(self):
        completions = [day(1), day(2), day(3)]
        result = compute_streaks(DAILY, day(1), completions, now=day(5))
        assert result == StreakResult(current_streak=0, longest_streak=3)

    def test_input_order_does_not_matter(self):
        completions = [day(6), day(2), day(5), day(1), day(3)]
        result = compute_streaks(DAILY, day(1), completions, now=day(6))
        assert result == StreakResult(current_streak=2, longest_streak=3)

    def test_accepts_datetimes_and_iso_strings(self):
        completions = [
            datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc),
            "2024-01-02",
            "2024-01-03T21:00:00Z",
        ]
        result = compute_streaks(DAILY, "2024-01-01", completions, now=datetime(2024, 1, 3, 22, 0))
        assert result == StreakResult(3, 3)

    def test_duplicate_days_count_once(self):
        result = compute_streaks(DAILY, day(1), [day(1), day(1), day(2)], now=day(2))
        assert result == StreakResult(2, 2)

    def test_weekends_neither_extend_nor_break_weekday_streak(self):
        completions = [day(n) for n in (1, 2, 3, 4, 5, 8)]
        result = compute_streaks(WEEKDAYS, day(1), completions, now=day(8))
        assert result == StreakResult(6, 6)

    def test_weekday_schedule_starting_saturday_without_completions(self):
        # Saturday start, Monday "now": no completions at all.
        assert compute_streaks(WEEKDAYS, day(6), [], now=day(8)) == StreakResult(0, 0)

    def test_completion_on_unexpected_day_is_ignored(self):
        result = compute_streaks(WEEKDAYS, day(1), [day(6), day(7)], now=day(8))
        assert result == StreakResult(0, 0)

    def test_three_per_week_counts_monday_wednesday_friday(self):
        completions = [day(1), day(3), day(5)]
        result = compute_streaks(THREE_PER_WEEK, day(1), completions, now=day(7))
        assert result == StreakResult(3, 3)

    def test_custom_days_count_consecutive_occurrences(self):
        tue_thu = ScheduleDescriptor.custom(["tue", "thu"])
        completions = [day(2), day(4), day(9)]
        result = compute_streaks(tue_thu, day(1), completions, now=day(10))
        assert result == StreakResult(3, 3)

    def test_custom_days_missed_occurrence_breaks_streak(self):
        tue_thu = ScheduleDescriptor.custom(["tue", "thu"])
        result = compute_streaks(tue_thu, day(1), [day(2), day(9)], now=day(10))
        assert result == StreakResult(1, 1)

    def test_no_expected_days_in_range(self):
        sundays = ScheduleDescriptor.custom(["sun"])
        assert compute_streaks(sundays, day(1), [day(2)], now=day(6)) == StreakResult(0, 0)

    def test_deterministic(self):
        completions = [day(n) for n in (1, 2, 4, 5, 6, 9)]
        first = compute_streaks(WEEKDAYS, day(1), completions, now=day(10))
        second = compute_streaks(WEEKDAYS, day(1), completions, now=day(10))
        assert first == second

    @pytest.mark.parametrize("seed", range(20))
    def test_longest_never_below_current(self, seed):
        rng = random.Random(seed)
        descriptor = rng.choice(
            [DAILY, WEEKDAYS, THREE_PER_WEEK, ScheduleDescriptor.custom(["tue", "sat"])]
        )
        completions = [MONDAY + timedelta(days=n) for n in range(90) if rng.random() < 0.7]
        result = compute_streaks(descriptor, MONDAY, completions, now=MONDAY + timedelta(days=89))
        assert result.longest_streak >= result.current_streak >= 0

    def test_malformed_completion_propagates(self):
        with pytest.raises(MalformedDay):
            compute_streaks(DAILY, day(1), ["not-a-date"], now=day(2))

    def test_malformed_now_propagates_even_without_completions(self):
        with pytest.raises(MalformedDay):
            compute_streaks(DAILY, day(1), [], now="someday")


class TestCompletionStats:
    def test_daily_rate(self):
        stats = compute_completion_stats(DAILY, day(1), [day(1), day(2), day(4)], now=day(4))
        assert stats.expected_check_ins == 4
        assert stats.total_check_ins == 3
        assert stats.completion_rate == 75
        assert stats.check_ins_by_date == {"2024-01-01": 1, "2024-01-02": 1, "2024-01-04": 1}

    def test_weekdays_expected_count_skips_weekend(self):
        # Saturday start, Monday now: only Monday is expected.
        stats = compute_completion_stats(WEEKDAYS, day(6), [], now=day(8))
        assert stats.expected_check_ins == 1
        assert stats.completion_rate == 0

    def test_vacuous_rate_is_100(self):
        # Saturday is not expected by a weekday schedule starting that day.
        stats = compute_completion_stats(WEEKDAYS, day(6), [], now=day(6))
        assert stats.expected_check_ins == 0
        assert stats.completion_rate == 100

    def test_future_start_is_vacuous(self):
        stats = compute_completion_stats(DAILY, day(10), [], now=day(1))
        assert stats.expected_check_ins == 0
        assert stats.completion_rate == 100

    def test_unexpected_day_counts_in_total_only(self):
        stats = compute_completion_stats(WEEKDAYS, day(1), [day(6)], now=day(8))
        assert stats.total_check_ins == 1
        assert stats.expected_check_ins == 6
        assert stats.completion_rate == 17

    def test_three_per_week_expected_days(self):
        stats = compute_completion_stats(THREE_PER_WEEK, day(1), [day(1), day(3)], now=day(7))
        assert stats.expected_check_ins == 3
        assert stats.completion_rate == 67

    def test_uses_same_expectation_as_streaks(self):
        tue_thu = ScheduleDescriptor.custom(["tue", "thu"])
        completions = [day(2), day(4), day(9)]
        stats = compute_completion_stats(tue_thu, day(1), completions, now=day(10))
        streaks = compute_streaks(tue_thu, day(1), completions, now=day(10))
        assert stats.expected_check_ins == streaks.longest_streak == 3
        assert stats.completion_rate == 100

    def test_to_dict_uses_api_keys(self):
        stats = compute_completion_stats(DAILY, day(1), [day(1)], now=day(1))
        assert stats.to_dict() == {
            "totalCheckIns": 1,
            "expectedCheckIns": 1,
            "completionRate": 100,
            "checkInsByDate": {"2024-01-01": 1},
        }


@pytest.mark.parametrize(
    ("total", "expected", "rate"),
    [(0, 0, 100), (0, 5, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (3, 3, 100)],
)
def test_completion_rate_rounds_half_up(total, expected, rate):
    assert completion_rate(total, expected) == rate
