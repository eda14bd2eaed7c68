"""Emoji reactions ("cheers") on public loops."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Reaction(SQLModel, table=True):
    """A single user's emoji on a loop; at most one per user and loop."""

    __tablename__: ClassVar[str] = "reaction"
    __table_args__ = (UniqueConstraint("loop_id", "user_id", name="uq_reaction_loop_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    loop_id: int = Field(foreign_key="loop.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False)
    emoji: str = Field(nullable=False, max_length=16)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "loopId": self.loop_id,
            "userId": self.user_id,
            "emoji": self.emoji,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
