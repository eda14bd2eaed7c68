"""Missed-day sweep endpoint for an external scheduler."""

from __future__ import annotations

import hmac

from flask import current_app, jsonify, request

from ...errors import AuthenticationRequired
from ...extensions import get_services
from . import bp


def _require_api_key() -> None:
    expected = current_app.config["HABITLOOP_CONFIG"].CRON_API_KEY
    if not expected:
        return
    supplied = request.headers.get("X-API-Key", "")
    if not hmac.compare_digest(supplied, expected):
        raise AuthenticationRequired("Invalid API key")


@bp.route("/update-streaks", methods=("GET", "POST"))
def update_streaks():
    """Mark yesterday missed where expected and refresh the affected streaks."""

    _require_api_key()
    summary = get_services().check_ins.sweep_missed_days()
    return jsonify(summary.to_dict())
