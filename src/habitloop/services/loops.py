"""Loop lifecycle and the statistics read model."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from sqlalchemy.exc import IntegrityError

from ..domain.days import DayLike, to_day, utc_today
from ..domain.repositories import CheckInRepository, LoopRepository
from ..domain.schedule import ScheduleDescriptor
from ..errors import DuplicateLoopTitle, LoopNotFound
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelCheckInRepository, SQLModelLoopRepository
from ..logging_config import get_logger
from ..models import Loop, Visibility
from .streaks import compute_completion_stats, compute_streaks

logger = get_logger("services.loops")


class LoopService:
    """Create, read and delete loops for their owner."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        loops: Optional[LoopRepository] = None,
        check_ins: Optional[CheckInRepository] = None,
    ):
        self.loops = loops or SQLModelLoopRepository(session_factory)
        self.check_ins = check_ins or SQLModelCheckInRepository(session_factory)

    def create_loop(
        self,
        owner_id: int,
        *,
        title: str,
        frequency: Union[str, Iterable[str], ScheduleDescriptor],
        start_date: DayLike | None = None,
        visibility: str = Visibility.PRIVATE.value,
        icon_emoji: Optional[str] = None,
        cover_image_url: Optional[str] = None,
    ) -> Loop:
        """Persist a new loop; titles are unique per owner."""

        descriptor = ScheduleDescriptor.from_frequency(frequency)
        start = to_day(start_date) if start_date is not None else utc_today()
        title = title.strip()

        if self.loops.get_by_title(title, owner_id=owner_id) is not None:
            raise DuplicateLoopTitle()

        loop = Loop(
            owner_id=owner_id,
            title=title,
            frequency=descriptor.to_storage(),
            start_date=start,
            visibility=Visibility(visibility).value,
            icon_emoji=icon_emoji,
            cover_image_url=cover_image_url,
        )
        try:
            loop = self.loops.create(loop)
        except IntegrityError as exc:
            raise DuplicateLoopTitle() from exc

        logger.info("Created loop", extra={"loop_id": loop.id, "owner_id": owner_id})
        return loop

    def list_loops(self, owner_id: int) -> list[Loop]:
        return self.loops.list_for_owner(owner_id=owner_id)

    def get_loop(self, loop_id: int, owner_id: int) -> Loop:
        loop = self.loops.get_owned(loop_id, owner_id=owner_id)
        if loop is None:
            raise LoopNotFound()
        return loop

    def delete_loop(self, loop_id: int, owner_id: int) -> None:
        """Delete a loop together with its check-ins, reactions and clone records."""

        loop = self.get_loop(loop_id, owner_id)
        self.loops.delete_cascade(loop.id)
        logger.info("Deleted loop", extra={"loop_id": loop.id, "owner_id": owner_id})

    def loop_stats(self, loop_id: int, owner_id: int, *, now: DayLike | None = None) -> dict:
        """Streaks plus completion statistics, computed fresh from check-ins."""

        loop = self.get_loop(loop_id, owner_id)
        days = self.check_ins.done_days(loop.id, user_id=owner_id)
        descriptor = loop.descriptor

        payload = compute_streaks(descriptor, loop.start_date, days, now).to_dict()
        payload.update(compute_completion_stats(descriptor, loop.start_date, days, now).to_dict())
        payload["startDate"] = loop.start_date.isoformat()
        return payload


__all__ = ["LoopService"]
