"""Exception hierarchy shared by the engine, services and HTTP layer."""

from __future__ import annotations


class HabitLoopError(Exception):
    """Base class for all application errors."""

    status_code = 400
    code = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code).strip()

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidScheduleKind(HabitLoopError):
    """Loop frequency is not a recognized schedule."""

    code = "invalid_schedule_kind"


class MalformedDay(HabitLoopError):
    """Value cannot be normalized to a calendar day."""

    code = "malformed_day"


class ValidationFailed(HabitLoopError):
    """Request payload failed validation."""

    code = "validation_failed"

    def __init__(self, message: str | None = None, *, issues: list | None = None) -> None:
        super().__init__(message)
        self.issues = issues or []

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["issues"] = self.issues
        return payload


class AuthenticationRequired(HabitLoopError):
    """Authentication required."""

    status_code = 401
    code = "unauthorized"


class LoopNotPublic(HabitLoopError):
    """Loop is not public."""

    status_code = 403
    code = "loop_not_public"


class LoopNotFound(HabitLoopError):
    """Loop not found or not authorized."""

    status_code = 404
    code = "loop_not_found"


class CheckInNotFound(HabitLoopError):
    """Check-in not found."""

    status_code = 404
    code = "checkin_not_found"


class ReactionNotFound(HabitLoopError):
    """Reaction not found."""

    status_code = 404
    code = "reaction_not_found"


class DuplicateLoopTitle(HabitLoopError):
    """A loop with this title already exists."""

    status_code = 409
    code = "duplicate_title"


class DuplicateUser(HabitLoopError):
    """An account with this email already exists."""

    status_code = 409
    code = "duplicate_user"


__all__ = [
    "AuthenticationRequired",
    "CheckInNotFound",
    "DuplicateLoopTitle",
    "DuplicateUser",
    "HabitLoopError",
    "InvalidScheduleKind",
    "LoopNotFound",
    "LoopNotPublic",
    "MalformedDay",
    "ReactionNotFound",
    "ValidationFailed",
]
