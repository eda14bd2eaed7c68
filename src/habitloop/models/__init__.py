"""SQLModel table exports."""

from .checkin import CheckIn, CheckInStatus
from .clone import LoopClone
from .loop import Loop, Visibility
from .reaction import Reaction
from .user import User

__all__ = [
    "CheckIn",
    "CheckInStatus",
    "Loop",
    "LoopClone",
    "Reaction",
    "User",
    "Visibility",
]
