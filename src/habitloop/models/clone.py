"""Clone events: a user copying someone else's public loop."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class LoopClone(SQLModel, table=True):
    """Records which loop was copied, into which new loop, by whom."""

    __tablename__: ClassVar[str] = "loop_clone"

    id: Optional[int] = Field(default=None, primary_key=True)
    original_loop_id: int = Field(foreign_key="loop.id", nullable=False, index=True)
    cloned_loop_id: int = Field(foreign_key="loop.id", nullable=False)
    cloned_by: int = Field(foreign_key="user.id", nullable=False, index=True)
    cloned_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
