"""Public loop feed, reactions and cloning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..domain.days import DayLike, utc_today
from ..domain.repositories import LoopRepository
from ..domain.schedule import ScheduleDescriptor
from ..errors import LoopNotFound, LoopNotPublic, ReactionNotFound, ValidationFailed
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelLoopRepository, SQLModelSocialRepository
from ..infra.repositories.loop import SORT_LONGEST_STREAK, SORT_MOST_CHEERED, SORT_NEWEST
from ..logging_config import get_logger
from ..models import Loop, Reaction, Visibility
from .loops import LoopService

logger = get_logger("services.explore")

SORT_OPTIONS = (SORT_NEWEST, SORT_MOST_CHEERED, SORT_LONGEST_STREAK)
MIN_LIMIT = 1
MAX_LIMIT = 50


@dataclass(frozen=True)
class FeedPage:
    """One page of the public feed."""

    loops: list[dict] = field(default_factory=list)
    next_cursor: Optional[str] = None

    def to_dict(self) -> dict:
        return {"loops": list(self.loops), "nextCursor": self.next_cursor}


def clamp_limit(limit: Optional[int], default: int = 10) -> int:
    if limit is None:
        return default
    return min(max(limit, MIN_LIMIT), MAX_LIMIT)


class ExploreService:
    """Read side of public loops plus the social counters around them."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        loops: Optional[LoopRepository] = None,
        social: Optional[SQLModelSocialRepository] = None,
    ):
        self.loops = loops or SQLModelLoopRepository(session_factory)
        self.social = social or SQLModelSocialRepository(session_factory)
        self.loop_service = LoopService(session_factory, loops=self.loops)

    def list_public_loops(
        self,
        *,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        frequency: Optional[str] = None,
        sort_by: str = SORT_NEWEST,
        default_limit: int = 10,
    ) -> FeedPage:
        if sort_by not in SORT_OPTIONS:
            raise ValidationFailed(f"sortBy must be one of {', '.join(SORT_OPTIONS)}")

        cursor_id: Optional[int] = None
        if cursor:
            try:
                cursor_id = int(cursor)
            except ValueError as exc:
                raise ValidationFailed("Invalid cursor format") from exc

        stored_frequency = None
        if frequency:
            stored_frequency = ScheduleDescriptor.from_frequency(frequency).to_storage()

        page_size = clamp_limit(limit, default_limit)
        rows = self.loops.list_public(
            limit=page_size + 1,
            cursor=cursor_id,
            frequency=stored_frequency,
            sort_by=sort_by,
        )
        has_more = len(rows) > page_size
        rows = rows[:page_size]

        ids = [loop.id for loop in rows]
        cheers = self.social.reaction_counts(ids)
        clones = self.social.clone_counts(ids)
        emails = self.social.owner_emails(loop.owner_id for loop in rows)

        items = [
            {
                "loopId": loop.id,
                "ownerId": loop.owner_id,
                "ownerEmail": emails.get(loop.owner_id, ""),
                "title": loop.title,
                "frequency": loop.descriptor.to_json(),
                "currentStreak": loop.current_streak or 0,
                "longestStreak": loop.longest_streak or 0,
                "iconEmoji": loop.icon_emoji,
                "coverImageUrl": loop.cover_image_url,
                "cheeredCount": cheers.get(loop.id, 0),
                "clonedCount": clones.get(loop.id, 0),
                "createdAt": loop.created_at.isoformat() if loop.created_at else None,
            }
            for loop in rows
        ]
        next_cursor = str(rows[-1].id) if has_more and rows else None
        return FeedPage(loops=items, next_cursor=next_cursor)

    def _public_loop(self, loop_id: int, action: str) -> Loop:
        loop = self.loops.get_by_id(loop_id)
        if loop is None:
            raise LoopNotFound("Loop not found")
        if not loop.is_public:
            raise LoopNotPublic(f"Cannot {action} non-public loops")
        return loop

    def react(self, loop_id: int, user_id: int, emoji: str) -> Reaction:
        """Add or replace ``user_id``'s reaction on a public loop."""

        loop = self._public_loop(loop_id, "react to")
        return self.social.upsert_reaction(loop_id=loop.id, user_id=user_id, emoji=emoji)

    def remove_reaction(self, loop_id: int, user_id: int) -> None:
        if not self.social.delete_reaction(loop_id=loop_id, user_id=user_id):
            raise ReactionNotFound()

    def clone_loop(self, loop_id: int, user_id: int, *, now: DayLike | None = None) -> Loop:
        """Copy a public loop into ``user_id``'s account as a fresh private loop."""

        original = self._public_loop(loop_id, "clone")
        clone = self.loop_service.create_loop(
            user_id,
            title=original.title,
            frequency=original.frequency,
            start_date=utc_today(now),
            visibility=Visibility.PRIVATE.value,
            icon_emoji=original.icon_emoji,
            cover_image_url=original.cover_image_url,
        )
        self.social.record_clone(
            original_loop_id=original.id,
            cloned_loop_id=clone.id,
            cloned_by=user_id,
        )
        logger.info(
            "Cloned loop",
            extra={"original_loop_id": original.id, "cloned_loop_id": clone.id, "user_id": user_id},
        )
        return clone


__all__ = ["ExploreService", "FeedPage", "SORT_OPTIONS", "clamp_limit"]
