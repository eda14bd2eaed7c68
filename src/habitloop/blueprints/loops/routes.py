"""Loop routes: CRUD, statistics and check-ins."""

from __future__ import annotations

from urllib.parse import unquote

from flask import jsonify

from ...domain.days import to_day
from ...extensions import get_services
from ..auth.decorators import current_user_id, login_required
from ..forms import json_body, parse_form
from . import bp
from .forms import CheckInForm, LoopForm


@bp.get("/")
@login_required
def list_loops():
    loops = get_services().loops.list_loops(current_user_id())
    return jsonify({"loops": [loop.to_dict() for loop in loops]})


@bp.post("/")
@login_required
def create_loop():
    form = parse_form(LoopForm, json_body())
    loop = get_services().loops.create_loop(
        current_user_id(),
        title=form.title,
        frequency=form.frequency,
        start_date=form.start_date,
        visibility=form.visibility.value,
        icon_emoji=form.icon_emoji,
        cover_image_url=form.cover_image_url,
    )
    return jsonify({"loop": loop.to_dict()}), 201


@bp.get("/<int:loop_id>")
@login_required
def get_loop(loop_id: int):
    loop = get_services().loops.get_loop(loop_id, current_user_id())
    return jsonify({"loop": loop.to_dict()})


@bp.delete("/<int:loop_id>")
@login_required
def delete_loop(loop_id: int):
    get_services().loops.delete_loop(loop_id, current_user_id())
    return jsonify({"success": True})


@bp.get("/<int:loop_id>/stats")
@login_required
def loop_stats(loop_id: int):
    return jsonify(get_services().loops.loop_stats(loop_id, current_user_id()))


@bp.get("/<int:loop_id>/checkin")
@login_required
def list_check_ins(loop_id: int):
    records = get_services().check_ins.list_check_ins(loop_id, current_user_id())
    return jsonify({"checkIns": [record.to_dict() for record in records]})


@bp.post("/<int:loop_id>/checkin")
@login_required
def check_in(loop_id: int):
    form = parse_form(CheckInForm, json_body())
    outcome = get_services().check_ins.record_completion(loop_id, current_user_id(), form.day)
    return jsonify(outcome.to_dict()), 201 if outcome.created else 200


@bp.delete("/<int:loop_id>/checkin/<path:day>")
@login_required
def retract_check_in(loop_id: int, day: str):
    streaks = get_services().check_ins.retract_completion(
        loop_id, current_user_id(), to_day(unquote(day))
    )
    payload = {"success": True}
    payload.update(streaks.to_dict())
    return jsonify(payload)
