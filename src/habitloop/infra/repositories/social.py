"""Reactions and clone events on public loops."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import func
from sqlmodel import select

from ...models import LoopClone, Reaction, User
from ..database import SessionFactory


class SQLModelSocialRepository:
    """Counters and upserts backing the public feed."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_reaction(self, loop_id: int, user_id: int) -> Optional[Reaction]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Reaction).where(Reaction.loop_id == loop_id, Reaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def upsert_reaction(self, *, loop_id: int, user_id: int, emoji: str) -> Reaction:
        with self.session_factory() as session:
            reaction = session.exec(
                select(Reaction).where(Reaction.loop_id == loop_id, Reaction.user_id == user_id)
            ).first()
            if reaction is None:
                reaction = Reaction(loop_id=loop_id, user_id=user_id, emoji=emoji)
            else:
                reaction.emoji = emoji
            session.add(reaction)
            session.commit()
            session.refresh(reaction)
            session.expunge(reaction)
            return reaction

    def delete_reaction(self, *, loop_id: int, user_id: int) -> bool:
        with self.session_factory() as session:
            reaction = session.exec(
                select(Reaction).where(Reaction.loop_id == loop_id, Reaction.user_id == user_id)
            ).first()
            if reaction is None:
                return False
            session.delete(reaction)
            session.commit()
            return True

    def record_clone(self, *, original_loop_id: int, cloned_loop_id: int, cloned_by: int) -> LoopClone:
        with self.session_factory() as session:
            record = LoopClone(
                original_loop_id=original_loop_id,
                cloned_loop_id=cloned_loop_id,
                cloned_by=cloned_by,
            )
            session.add(record)
            session.commit()
            session.refresh(record)
            session.expunge(record)
            return record

    def reaction_counts(self, loop_ids: Iterable[int]) -> dict[int, int]:
        ids = list(loop_ids)
        if not ids:
            return {}
        with self.session_factory() as session:
            rows = session.exec(
                select(Reaction.loop_id, func.count(Reaction.id))
                .where(Reaction.loop_id.in_(ids))  # type: ignore[attr-defined]
                .group_by(Reaction.loop_id)
            ).all()
            return {loop_id: count for loop_id, count in rows}

    def clone_counts(self, loop_ids: Iterable[int]) -> dict[int, int]:
        ids = list(loop_ids)
        if not ids:
            return {}
        with self.session_factory() as session:
            rows = session.exec(
                select(LoopClone.original_loop_id, func.count(LoopClone.id))
                .where(LoopClone.original_loop_id.in_(ids))  # type: ignore[attr-defined]
                .group_by(LoopClone.original_loop_id)
            ).all()
            return {loop_id: count for loop_id, count in rows}

    def owner_emails(self, user_ids: Iterable[int]) -> dict[int, str]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        with self.session_factory() as session:
            rows = session.exec(
                select(User.id, User.email).where(User.id.in_(ids))  # type: ignore[union-attr]
            ).all()
            return {user_id: email for user_id, email in rows}
