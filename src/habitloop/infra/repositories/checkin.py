"""SQLModel implementation of the check-in repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import col, select

from ...models import CheckIn, CheckInStatus
from ..database import SessionFactory


class SQLModelCheckInRepository:
    """Completion records keyed by ``(loop_id, occurred_on)``."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, loop_id: int, occurred_on: date) -> Optional[CheckIn]:
        with self.session_factory() as session:
            obj = session.exec(
                select(CheckIn)
                .where(CheckIn.loop_id == loop_id)
                .where(CheckIn.occurred_on == occurred_on)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def done_days(self, loop_id: int, *, user_id: int) -> list[date]:
        with self.session_factory() as session:
            return list(
                session.exec(
                    select(CheckIn.occurred_on)
                    .where(CheckIn.loop_id == loop_id)
                    .where(CheckIn.user_id == user_id)
                    .where(CheckIn.status == CheckInStatus.DONE.value)
                    .order_by(col(CheckIn.occurred_on))
                ).all()
            )

    def list_for_loop(self, loop_id: int, *, user_id: int) -> list[CheckIn]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(CheckIn)
                    .where(CheckIn.loop_id == loop_id)
                    .where(CheckIn.user_id == user_id)
                    .order_by(col(CheckIn.occurred_on).desc())
                ).all()
            )
            session.expunge_all()
            return rows

    def add(self, check_in: CheckIn) -> CheckIn:
        with self.session_factory() as session:
            session.add(check_in)
            session.commit()
            session.refresh(check_in)
            session.expunge(check_in)
            return check_in

    def set_status(self, check_in_id: int, status: str) -> Optional[CheckIn]:
        with self.session_factory() as session:
            obj = session.get(CheckIn, check_in_id)
            if obj is None:
                return None
            obj.status = status
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def delete(self, loop_id: int, occurred_on: date, *, user_id: int) -> bool:
        with self.session_factory() as session:
            obj = session.exec(
                select(CheckIn)
                .where(CheckIn.loop_id == loop_id)
                .where(CheckIn.user_id == user_id)
                .where(CheckIn.occurred_on == occurred_on)
            ).first()
            if obj is None:
                return False
            session.delete(obj)
            session.commit()
            return True
