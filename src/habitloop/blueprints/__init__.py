"""Blueprint exports."""

from . import auth, cron, explore, loops

__all__ = ["auth", "cron", "explore", "loops"]
