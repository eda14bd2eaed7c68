"""Schedule descriptors: which calendar days a loop expects a check-in."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Union

from ..errors import InvalidScheduleKind

# Index matches ``date.weekday()`` (Monday == 0).
WEEKDAY_ABBREVIATIONS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

# "3x/week" loops do not store their chosen days; this is the fixed pattern.
THREE_PER_WEEK_DAYS: frozenset[str] = frozenset({"mon", "wed", "fri"})


class ScheduleKind(str, Enum):
    """Supported recurrence patterns."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    THREE_PER_WEEK = "3x/week"
    CUSTOM = "custom"


LABELED_KINDS = {kind.value: kind for kind in ScheduleKind if kind is not ScheduleKind.CUSTOM}

Frequency = Union[str, Iterable[str], "ScheduleDescriptor"]


def _normalize_days(days: Iterable[str]) -> frozenset[str]:
    normalized = set()
    for raw in days:
        if not isinstance(raw, str):
            raise InvalidScheduleKind(f"Custom day {raw!r} is not a weekday abbreviation")
        day = raw.strip().lower()
        if day not in WEEKDAY_ABBREVIATIONS:
            raise InvalidScheduleKind(f"Unknown weekday {raw!r}")
        normalized.add(day)
    return frozenset(normalized)


@dataclass(frozen=True)
class ScheduleDescriptor:
    """Immutable description of a loop's recurrence pattern.

    ``days`` is only meaningful for :attr:`ScheduleKind.CUSTOM` and must be
    non-empty there; every other kind carries an empty set.
    """

    kind: ScheduleKind
    days: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        try:
            kind = ScheduleKind(self.kind)
        except ValueError as exc:
            raise InvalidScheduleKind(f"Unknown schedule kind {self.kind!r}") from exc
        days = _normalize_days(self.days)
        if kind is ScheduleKind.CUSTOM and not days:
            raise InvalidScheduleKind("Custom schedules need at least one weekday")
        if kind is not ScheduleKind.CUSTOM and days:
            raise InvalidScheduleKind(f"{kind.value!r} schedules do not take custom days")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "days", days)

    @classmethod
    def daily(cls) -> "ScheduleDescriptor":
        return cls(ScheduleKind.DAILY)

    @classmethod
    def custom(cls, days: Iterable[str]) -> "ScheduleDescriptor":
        return cls(ScheduleKind.CUSTOM, frozenset(days))

    @classmethod
    def from_frequency(cls, frequency: Frequency) -> "ScheduleDescriptor":
        """Build a descriptor from a stored or submitted frequency.

        Accepts one of the labels (``daily``, ``weekdays``, ``3x/week``), a list
        of weekday abbreviations, or the comma-separated form used for storage.
        """

        if isinstance(frequency, ScheduleDescriptor):
            return frequency
        if isinstance(frequency, str):
            text = frequency.strip().lower()
            if text in LABELED_KINDS:
                return cls(LABELED_KINDS[text])
            if not text:
                raise InvalidScheduleKind("Frequency is empty")
            return cls.custom(part for part in text.split(",") if part.strip())
        if isinstance(frequency, (list, tuple, set, frozenset)):
            return cls.custom(frequency)
        raise InvalidScheduleKind(f"Unsupported frequency {frequency!r}")

    def expects_action(self, day: date) -> bool:
        """Return True when a check-in is expected on ``day``."""

        weekday = day.weekday()
        if self.kind is ScheduleKind.DAILY:
            return True
        if self.kind is ScheduleKind.WEEKDAYS:
            return weekday < 5
        if self.kind is ScheduleKind.THREE_PER_WEEK:
            return WEEKDAY_ABBREVIATIONS[weekday] in THREE_PER_WEEK_DAYS
        return WEEKDAY_ABBREVIATIONS[weekday] in self.days

    @property
    def ordered_days(self) -> list[str]:
        return [day for day in WEEKDAY_ABBREVIATIONS if day in self.days]

    def to_storage(self) -> str:
        """Serialize for the ``loop.frequency`` column."""

        if self.kind is ScheduleKind.CUSTOM:
            return ",".join(self.ordered_days)
        return self.kind.value

    def to_json(self) -> str | list[str]:
        """Serialize for API payloads: a label, or the list of custom days."""

        if self.kind is ScheduleKind.CUSTOM:
            return self.ordered_days
        return self.kind.value


def expects_action(descriptor: ScheduleDescriptor, day: date) -> bool:
    """Module-level form of :meth:`ScheduleDescriptor.expects_action`."""

    return descriptor.expects_action(day)


__all__ = [
    "LABELED_KINDS",
    "ScheduleDescriptor",
    "ScheduleKind",
    "THREE_PER_WEEK_DAYS",
    "WEEKDAY_ABBREVIATIONS",
    "expects_action",
]
