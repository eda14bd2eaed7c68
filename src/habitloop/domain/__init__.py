"""Pure domain types: calendar days and schedule descriptors."""

from .days import to_day, utc_today
from .schedule import ScheduleDescriptor, ScheduleKind, expects_action

__all__ = ["ScheduleDescriptor", "ScheduleKind", "expects_action", "to_day", "utc_today"]
