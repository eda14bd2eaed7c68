"""Repository protocol definitions for the domain layer."""

from .checkin import CheckInRepository
from .loop import LoopRepository

__all__ = ["CheckInRepository", "LoopRepository"]
