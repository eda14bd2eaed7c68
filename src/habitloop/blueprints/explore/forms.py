"""Explore query and reaction form definitions."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LIMIT = 10


class ExploreQuery(BaseModel):
    """Query-string parameters for the public feed."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    cursor: Optional[str] = None
    limit: Optional[int] = None
    frequency: Optional[str] = None
    sort_by: Literal["newest", "mostCheered", "longestStreak"] = Field(
        default="newest", alias="sortBy"
    )

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, value: Any) -> Optional[int]:
        """Unparseable limits fall back to the default page size."""

        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return DEFAULT_LIMIT

    @field_validator("cursor", "frequency", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReactionForm(BaseModel):
    """Emoji reaction payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    emoji: str = Field(min_length=1, max_length=4)


__all__ = ["DEFAULT_LIMIT", "ExploreQuery", "ReactionForm"]
