"""Check-in (completion record) table."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CheckInStatus(str, Enum):
    """Outcome recorded for a loop on a calendar day."""

    DONE = "done"
    MISSED = "missed"


class CheckIn(SQLModel, table=True):
    """One record per loop and UTC calendar day."""

    __tablename__: ClassVar[str] = "checkin"
    __table_args__ = (UniqueConstraint("loop_id", "occurred_on", name="uq_checkin_loop_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    loop_id: int = Field(foreign_key="loop.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    status: str = Field(default=CheckInStatus.DONE.value, nullable=False, max_length=8)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def is_done(self) -> bool:
        return self.status == CheckInStatus.DONE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "loopId": self.loop_id,
            "userId": self.user_id,
            "date": self.occurred_on.isoformat(),
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
