"""Streak and completion-rate calculations.

Both calculations walk the same calendar range with the same
:meth:`ScheduleDescriptor.expects_action` predicate, so the streak numbers and
the completion rate can never disagree about which days were expected.
Neither function performs I/O; callers fetch completion days first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Iterator

from ..domain.days import DayLike, to_day, utc_today
from ..domain.schedule import ScheduleDescriptor


@dataclass(frozen=True)
class StreakResult:
    """Current and best run of consecutive expected days with a check-in."""

    current_streak: int = 0
    longest_streak: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"currentStreak": self.current_streak, "longestStreak": self.longest_streak}


@dataclass(frozen=True)
class CompletionStats:
    """On-demand completion summary for a loop."""

    total_check_ins: int
    expected_check_ins: int
    completion_rate: int
    check_ins_by_date: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalCheckIns": self.total_check_ins,
            "expectedCheckIns": self.expected_check_ins,
            "completionRate": self.completion_rate,
            "checkInsByDate": dict(self.check_ins_by_date),
        }


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from ``start`` to ``end`` inclusive (empty if start > end)."""

    cursor = start
    step = timedelta(days=1)
    while cursor <= end:
        yield cursor
        cursor += step


def expected_days(descriptor: ScheduleDescriptor, start: date, end: date) -> Iterator[date]:
    """Yield the days in ``[start, end]`` on which ``descriptor`` expects an action."""

    return (day for day in iter_days(start, end) if descriptor.expects_action(day))


def compute_streaks(
    descriptor: ScheduleDescriptor,
    start_date: DayLike,
    completions: Iterable[DayLike],
    now: DayLike | None = None,
) -> StreakResult:
    """Return the current and longest streak for one loop.

    ``completions`` are the days with a ``done`` check-in, in any order.
    An expected day without a check-in breaks the running streak only once it
    is in the past: today stays open until it ends.
    """

    start = to_day(start_date)
    today = utc_today(now)

    completed = {to_day(day) for day in completions}
    if not completed:
        return StreakResult()

    running = 0
    longest = 0
    for day in expected_days(descriptor, start, today):
        if day in completed:
            running += 1
            longest = max(longest, running)
        elif day < today:
            running = 0

    return StreakResult(current_streak=running, longest_streak=longest)


def completion_rate(total: int, expected: int) -> int:
    """Percentage of expected days completed, rounded half up.

    A loop with no expected days yet counts as fully complete.
    """

    if expected <= 0:
        return 100
    return (200 * total + expected) // (2 * expected)


def compute_completion_stats(
    descriptor: ScheduleDescriptor,
    start_date: DayLike,
    completions: Iterable[DayLike],
    now: DayLike | None = None,
) -> CompletionStats:
    """Summarize check-ins against the days the schedule expected so far."""

    start = to_day(start_date)
    today = utc_today(now)

    check_ins_by_date: dict[str, int] = {}
    for day in sorted(to_day(value) for value in completions):
        key = day.isoformat()
        check_ins_by_date[key] = check_ins_by_date.get(key, 0) + 1

    total = sum(check_ins_by_date.values())
    expected = sum(1 for _ in expected_days(descriptor, start, today))

    return CompletionStats(
        total_check_ins=total,
        expected_check_ins=expected,
        completion_rate=completion_rate(total, expected),
        check_ins_by_date=check_ins_by_date,
    )


__all__ = [
    "CompletionStats",
    "StreakResult",
    "completion_rate",
    "compute_completion_stats",
    "compute_streaks",
    "expected_days",
    "iter_days",
]
