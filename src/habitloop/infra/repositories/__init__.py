"""Concrete repository implementations using SQLModel."""

from .checkin import SQLModelCheckInRepository
from .loop import SQLModelLoopRepository
from .social import SQLModelSocialRepository

__all__ = [
    "SQLModelCheckInRepository",
    "SQLModelLoopRepository",
    "SQLModelSocialRepository",
]
