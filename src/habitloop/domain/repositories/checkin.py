"""Check-in repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.checkin import CheckIn


class CheckInRepository(Protocol):
    """Completion record store keyed by loop and day."""

    def get(self, loop_id: int, occurred_on: date) -> Optional[CheckIn]:
        ...

    def done_days(self, loop_id: int, *, user_id: int) -> list[date]:
        """Return days with a ``done`` record, ascending."""
        ...

    def list_for_loop(self, loop_id: int, *, user_id: int) -> list[CheckIn]:
        """Return all records for a loop, newest first."""
        ...

    def add(self, check_in: CheckIn) -> CheckIn:
        """Insert a record; raises ``IntegrityError`` if the day is taken."""
        ...

    def set_status(self, check_in_id: int, status: str) -> Optional[CheckIn]:
        ...

    def delete(self, loop_id: int, occurred_on: date, *, user_id: int) -> bool:
        ...
