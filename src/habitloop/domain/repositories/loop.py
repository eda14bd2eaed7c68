"""Loop repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.loop import Loop
from ...services.streaks import StreakResult


class LoopRepository(Protocol):
    """Repository for managing loop entities."""

    def get_by_id(self, loop_id: int) -> Optional[Loop]:
        """Retrieve a loop regardless of owner."""
        ...

    def get_owned(self, loop_id: int, *, owner_id: int) -> Optional[Loop]:
        """Retrieve a loop only when ``owner_id`` owns it."""
        ...

    def get_by_title(self, title: str, *, owner_id: int) -> Optional[Loop]:
        ...

    def list_for_owner(self, *, owner_id: int) -> list[Loop]:
        """List an owner's loops, newest first."""
        ...

    def list_started_by(self, day: date) -> list[Loop]:
        """List every loop whose start date is on or before ``day``."""
        ...

    def create(self, loop: Loop) -> Loop:
        ...

    def save_streaks(self, loop_id: int, result: StreakResult) -> Optional[Loop]:
        """Persist cached streak fields."""
        ...

    def delete_cascade(self, loop_id: int) -> bool:
        """Delete a loop with its check-ins, reactions and clone records."""
        ...
