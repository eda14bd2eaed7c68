"""SQLModel implementation of the loop repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import and_, func, or_
from sqlmodel import col, select

from ...models import CheckIn, Loop, LoopClone, Reaction, Visibility
from ...services.streaks import StreakResult
from ..database import SessionFactory

SORT_NEWEST = "newest"
SORT_MOST_CHEERED = "mostCheered"
SORT_LONGEST_STREAK = "longestStreak"


class SQLModelLoopRepository:
    """SQLModel-based loop repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, loop_id: int) -> Optional[Loop]:
        with self.session_factory() as session:
            obj = session.get(Loop, loop_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_owned(self, loop_id: int, *, owner_id: int) -> Optional[Loop]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Loop).where(Loop.id == loop_id, Loop.owner_id == owner_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_title(self, title: str, *, owner_id: int) -> Optional[Loop]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Loop).where(Loop.owner_id == owner_id, Loop.title == title)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_owner(self, *, owner_id: int) -> list[Loop]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Loop)
                    .where(Loop.owner_id == owner_id)
                    .order_by(col(Loop.created_at).desc(), col(Loop.id).desc())
                ).all()
            )
            session.expunge_all()
            return rows

    def list_started_by(self, day: date) -> list[Loop]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Loop).where(Loop.start_date <= day).order_by(col(Loop.id))
                ).all()
            )
            session.expunge_all()
            return rows

    def create(self, loop: Loop) -> Loop:
        with self.session_factory() as session:
            session.add(loop)
            session.commit()
            session.refresh(loop)
            session.expunge(loop)
            return loop

    def save_streaks(self, loop_id: int, result: StreakResult) -> Optional[Loop]:
        with self.session_factory() as session:
            loop = session.get(Loop, loop_id)
            if loop is None:
                return None
            loop.current_streak = result.current_streak
            loop.longest_streak = result.longest_streak
            session.add(loop)
            session.commit()
            session.refresh(loop)
            session.expunge(loop)
            return loop

    def delete_cascade(self, loop_id: int) -> bool:
        with self.session_factory() as session:
            loop = session.get(Loop, loop_id)
            if loop is None:
                return False
            children = [
                *session.exec(select(CheckIn).where(CheckIn.loop_id == loop_id)).all(),
                *session.exec(select(Reaction).where(Reaction.loop_id == loop_id)).all(),
                *session.exec(
                    select(LoopClone).where(
                        or_(
                            LoopClone.original_loop_id == loop_id,
                            LoopClone.cloned_loop_id == loop_id,
                        )
                    )
                ).all(),
            ]
            for child in children:
                session.delete(child)
            # Children must be gone before the parent row when foreign keys are enforced.
            session.flush()
            session.delete(loop)
            session.commit()
            return True

    def list_public(
        self,
        *,
        limit: int,
        cursor: Optional[int] = None,
        frequency: Optional[str] = None,
        sort_by: str = SORT_NEWEST,
    ) -> list[Loop]:
        """Return up to ``limit`` public loops after ``cursor`` in feed order.

        Pagination is keyset-based on ``(metric, id)`` so a cursor stays valid
        for every sort order. ``cursor`` must be the id of a public loop.
        """

        cheers = (
            select(Reaction.loop_id, func.count(Reaction.id).label("cheers"))
            .group_by(Reaction.loop_id)
            .subquery()
        )
        cheer_count = func.coalesce(cheers.c.cheers, 0)

        statement = (
            select(Loop)
            .outerjoin(cheers, cheers.c.loop_id == Loop.id)
            .where(Loop.visibility == Visibility.PUBLIC.value)
        )
        if frequency is not None:
            statement = statement.where(Loop.frequency == frequency)

        if sort_by == SORT_MOST_CHEERED:
            metric = cheer_count
        elif sort_by == SORT_LONGEST_STREAK:
            metric = col(Loop.longest_streak)
        else:
            metric = None

        with self.session_factory() as session:
            if cursor is not None:
                if metric is None:
                    statement = statement.where(Loop.id < cursor)
                else:
                    anchor = session.exec(
                        select(metric)
                        .select_from(Loop)
                        .outerjoin(cheers, cheers.c.loop_id == Loop.id)
                        .where(Loop.id == cursor)
                    ).first()
                    anchor_value = anchor if anchor is not None else 0
                    statement = statement.where(
                        or_(metric < anchor_value, and_(metric == anchor_value, Loop.id < cursor))
                    )

            if metric is None:
                statement = statement.order_by(col(Loop.id).desc())
            else:
                statement = statement.order_by(metric.desc(), col(Loop.id).desc())

            rows = list(session.exec(statement.limit(limit)).all())
            session.expunge_all()
            return rows
