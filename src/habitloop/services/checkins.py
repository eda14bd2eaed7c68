"""Check-in orchestration: record, retract, recompute and sweep.

The streak engine never writes state. Every mutation here is followed by a
synchronous recompute whose result is persisted onto the loop's cached
``current_streak``/``longest_streak`` fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..domain.days import DayLike, to_day, utc_today
from ..domain.repositories import CheckInRepository, LoopRepository
from ..errors import CheckInNotFound, InvalidScheduleKind, LoopNotFound
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelCheckInRepository, SQLModelLoopRepository
from ..logging_config import get_logger
from ..models import CheckIn, CheckInStatus, Loop
from .streaks import StreakResult, compute_streaks

logger = get_logger("services.checkins")


@dataclass(frozen=True)
class CheckInOutcome:
    """Result of :meth:`CheckInService.record_completion`."""

    check_in: CheckIn
    created: bool
    streaks: StreakResult

    def to_dict(self) -> dict:
        payload = {"checkIn": self.check_in.to_dict(), "created": self.created}
        payload.update(self.streaks.to_dict())
        return payload


@dataclass(frozen=True)
class SweepSummary:
    """Counters reported by the missed-day sweep."""

    day: date
    processed: int = 0
    missed: int = 0
    skipped: int = 0

    def to_dict(self) -> dict:
        return {
            "success": True,
            "date": self.day.isoformat(),
            "processed": self.processed,
            "missedCheckIns": self.missed,
            "skipped": self.skipped,
        }


class CheckInService:
    """Owns every write to check-ins and to the cached streak fields."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        loops: Optional[LoopRepository] = None,
        check_ins: Optional[CheckInRepository] = None,
    ):
        self.loops = loops or SQLModelLoopRepository(session_factory)
        self.check_ins = check_ins or SQLModelCheckInRepository(session_factory)

    def _owned_loop(self, loop_id: int, owner_id: int) -> Loop:
        loop = self.loops.get_owned(loop_id, owner_id=owner_id)
        if loop is None:
            raise LoopNotFound()
        return loop

    def refresh_streaks(self, loop: Loop, *, now: DayLike | None = None) -> StreakResult:
        """Recompute streaks from the stored ``done`` days and persist them."""

        days = self.check_ins.done_days(loop.id, user_id=loop.owner_id)
        result = compute_streaks(loop.descriptor, loop.start_date, days, now)
        self.loops.save_streaks(loop.id, result)
        return result

    def record_completion(
        self,
        loop_id: int,
        owner_id: int,
        day: DayLike | None = None,
        *,
        now: DayLike | None = None,
    ) -> CheckInOutcome:
        """Mark ``day`` (default: today) done. Repeating the call is harmless.

        An existing ``done`` record is returned unchanged. A ``missed`` record
        written by the sweep is upgraded to ``done``.
        """

        loop = self._owned_loop(loop_id, owner_id)
        target = to_day(day) if day is not None else utc_today(now)

        created = False
        record = self.check_ins.get(loop.id, target)
        if record is None:
            try:
                record = self.check_ins.add(
                    CheckIn(
                        loop_id=loop.id,
                        user_id=owner_id,
                        occurred_on=target,
                        status=CheckInStatus.DONE.value,
                    )
                )
                created = True
            except IntegrityError:
                # Lost an insert race for the same day; the winner's row stands.
                record = self.check_ins.get(loop.id, target)
                if record is None:
                    raise
                logger.info(
                    "Concurrent check-in resolved to existing record",
                    extra={"loop_id": loop.id, "day": target.isoformat()},
                )
        if not record.is_done:
            record = self.check_ins.set_status(record.id, CheckInStatus.DONE.value) or record
            created = True

        streaks = self.refresh_streaks(loop, now=now)
        if created:
            logger.info(
                "Recorded check-in",
                extra={"loop_id": loop.id, "day": target.isoformat(), **streaks.to_dict()},
            )
        return CheckInOutcome(check_in=record, created=created, streaks=streaks)

    def retract_completion(
        self,
        loop_id: int,
        owner_id: int,
        day: DayLike,
        *,
        now: DayLike | None = None,
    ) -> StreakResult:
        """Delete the record for ``day``; raises :class:`CheckInNotFound` if absent."""

        loop = self._owned_loop(loop_id, owner_id)
        target = to_day(day)
        if not self.check_ins.delete(loop.id, target, user_id=owner_id):
            raise CheckInNotFound()
        streaks = self.refresh_streaks(loop, now=now)
        logger.info(
            "Retracted check-in",
            extra={"loop_id": loop.id, "day": target.isoformat(), **streaks.to_dict()},
        )
        return streaks

    def list_check_ins(self, loop_id: int, owner_id: int) -> list[CheckIn]:
        loop = self._owned_loop(loop_id, owner_id)
        return self.check_ins.list_for_loop(loop.id, user_id=owner_id)

    def sweep_missed_days(self, *, now: DayLike | None = None) -> SweepSummary:
        """Insert ``missed`` records for loops that expected yesterday but got nothing.

        Safe to run more than once per day: the per-day uniqueness of
        check-ins prevents a second ``missed`` row.
        """

        yesterday = utc_today(now) - timedelta(days=1)
        processed = missed = skipped = 0

        for loop in self.loops.list_started_by(yesterday):
            try:
                descriptor = loop.descriptor
            except InvalidScheduleKind:
                logger.warning(
                    "Skipping loop with unreadable frequency",
                    extra={"loop_id": loop.id, "frequency": loop.frequency},
                )
                skipped += 1
                continue

            if not descriptor.expects_action(yesterday):
                continue

            if self.check_ins.get(loop.id, yesterday) is None:
                try:
                    self.check_ins.add(
                        CheckIn(
                            loop_id=loop.id,
                            user_id=loop.owner_id,
                            occurred_on=yesterday,
                            status=CheckInStatus.MISSED.value,
                        )
                    )
                except IntegrityError:
                    logger.info(
                        "Record for yesterday appeared during sweep",
                        extra={"loop_id": loop.id, "day": yesterday.isoformat()},
                    )
                else:
                    missed += 1
                    self.refresh_streaks(loop, now=now)

            processed += 1

        summary = SweepSummary(day=yesterday, processed=processed, missed=missed, skipped=skipped)
        logger.info("Missed-day sweep finished", extra=summary.to_dict())
        return summary


__all__ = ["CheckInOutcome", "CheckInService", "SweepSummary"]
