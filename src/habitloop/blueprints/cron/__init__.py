"""Cron blueprint package: externally triggered maintenance jobs."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("cron", __name__, url_prefix="/cron")

from . import routes  # noqa: E402,F401 - import routes for registration

__all__ = ["bp"]
