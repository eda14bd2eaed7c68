"""Background scheduler for the daily missed-day sweep."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler as APScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger

if TYPE_CHECKING:
    from flask import Flask

logger = get_logger("scheduler")

SWEEP_JOB_ID = "missed_day_sweep"


class SweepScheduler:
    """Runs the missed-day sweep once a day inside the web process."""

    def __init__(self, app: "Flask"):
        """Initialize the scheduler with the Flask app whose services it uses.

        Args:
            app: Application carrying config and the initialized services
        """
        self.app = app
        self.scheduler: Optional[APScheduler] = None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        config = self.app.config["HABITLOOP_CONFIG"]
        self.scheduler = APScheduler(timezone="UTC")
        self.scheduler.add_job(
            func=self.run_sweep,
            trigger=CronTrigger(hour=config.SWEEP_HOUR, minute=config.SWEEP_MINUTE, timezone="UTC"),
            id=SWEEP_JOB_ID,
            name="Missed-day sweep",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(
            "Scheduled missed-day sweep",
            extra={"hour": config.SWEEP_HOUR, "minute": config.SWEEP_MINUTE},
        )

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_sweep(self) -> None:
        """Execute the sweep; failures are logged so the next run still fires."""
        from .extensions import get_services

        with self.app.app_context():
            try:
                get_services().check_ins.sweep_missed_days()
            except Exception:
                logger.exception("Scheduled missed-day sweep failed")


def create_scheduler(app: "Flask", *, auto_start: bool = False) -> SweepScheduler:
    """Create and optionally start a sweep scheduler.

    Args:
        app: Flask application
        auto_start: Whether to start the scheduler immediately

    Returns:
        SweepScheduler instance
    """
    scheduler = SweepScheduler(app)
    if auto_start:
        scheduler.start()
    return scheduler
