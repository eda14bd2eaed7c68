"""Flask CLI commands for HabitLoop."""

from __future__ import annotations

import click

from .domain.days import to_day
from .errors import MalformedDay


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("sweep-missed")
    @click.option(
        "--today",
        "today",
        default=None,
        help="Treat this ISO date as today (the sweep inspects the day before).",
    )
    def sweep_missed(today: str | None) -> None:
        """Record missed check-ins for yesterday and refresh streaks."""

        from .extensions import get_services

        try:
            now = to_day(today) if today else None
        except MalformedDay as exc:
            raise click.BadParameter(exc.message, param_hint="--today") from exc

        summary = get_services().check_ins.sweep_missed_days(now=now)
        click.echo(
            f"Swept {summary.day.isoformat()}: processed={summary.processed} "
            f"missed={summary.missed} skipped={summary.skipped}"
        )

    @app.cli.command("recompute-streaks")
    @click.argument("loop_id", type=int)
    def recompute_streaks(loop_id: int) -> None:
        """Recompute and persist the cached streaks of one loop."""

        from .extensions import get_services

        services = get_services()
        loop = services.check_ins.loops.get_by_id(loop_id)
        if loop is None:
            raise click.ClickException(f"Loop {loop_id} not found")
        result = services.check_ins.refresh_streaks(loop)
        click.echo(
            f"Loop {loop_id}: current={result.current_streak} longest={result.longest_streak}"
        )
