"""Loop and check-in form definitions."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.days import to_day
from ...domain.schedule import ScheduleDescriptor
from ...errors import InvalidScheduleKind, MalformedDay
from ...models import Visibility


def _coerce_day(value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return to_day(value)
    except MalformedDay as exc:
        raise ValueError(exc.message) from exc


class LoopForm(BaseModel):
    """Payload for creating a loop."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: str = Field(min_length=1, max_length=100, description="Short label for the loop")
    frequency: Union[str, list[str]] = Field(
        description="'daily', 'weekdays', '3x/week' or a list of weekday abbreviations"
    )
    start_date: Optional[date] = Field(default=None, alias="startDate")
    visibility: Visibility = Field(default=Visibility.PRIVATE)
    icon_emoji: Optional[str] = Field(default=None, alias="iconEmoji", max_length=16)
    cover_image_url: Optional[str] = Field(default=None, alias="coverImageUrl", max_length=500)

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, value: Union[str, list[str]]) -> Union[str, list[str]]:
        """Reject frequencies the schedule engine cannot interpret."""

        if isinstance(value, list) and not value:
            raise ValueError("At least one day must be selected.")
        try:
            return ScheduleDescriptor.from_frequency(value).to_json()
        except InvalidScheduleKind as exc:
            raise ValueError(exc.message) from exc

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, value: Any) -> Any:
        return _coerce_day(value)


class CheckInForm(BaseModel):
    """Payload for recording a check-in; the day defaults to today."""

    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(default=None, alias="date")

    @field_validator("day", mode="before")
    @classmethod
    def parse_day(cls, value: Any) -> Any:
        return _coerce_day(value)


__all__ = ["CheckInForm", "LoopForm"]
