"""Loop (habit schedule) table."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from ..domain.schedule import ScheduleDescriptor


class Visibility(str, Enum):
    """Who may see a loop."""

    PRIVATE = "private"
    PUBLIC = "public"
    FRIENDS = "friends"


class Loop(SQLModel, table=True):
    """A user-defined habit with a recurrence pattern and cached streaks."""

    __tablename__: ClassVar[str] = "loop"
    __table_args__ = (UniqueConstraint("owner_id", "title", name="uq_loop_owner_title"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=100)
    # Label ("daily", "weekdays", "3x/week") or comma-separated weekdays.
    frequency: str = Field(default="daily", nullable=False, max_length=64)
    start_date: date = Field(nullable=False, index=True)
    visibility: str = Field(default=Visibility.PRIVATE.value, nullable=False, max_length=16, index=True)
    icon_emoji: Optional[str] = Field(default=None, max_length=16)
    cover_image_url: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)

    @property
    def descriptor(self) -> ScheduleDescriptor:
        return ScheduleDescriptor.from_frequency(self.frequency)

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "frequency": self.descriptor.to_json(),
            "startDate": self.start_date.isoformat(),
            "visibility": self.visibility,
            "iconEmoji": self.icon_emoji,
            "coverImageUrl": self.cover_image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
        }
