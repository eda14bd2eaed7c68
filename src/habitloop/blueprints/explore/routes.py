"""Public feed plus reaction and clone endpoints."""

from __future__ import annotations

from flask import current_app, jsonify, request

from ...extensions import get_services
from ..auth.decorators import current_user_id, login_required
from ..forms import json_body, parse_form
from . import bp
from .forms import ExploreQuery, ReactionForm


@bp.get("/explore/")
def explore():
    """Public loops, newest first unless ``sortBy`` says otherwise. No login needed."""

    query = parse_form(ExploreQuery, request.args.to_dict())
    page = get_services().explore.list_public_loops(
        cursor=query.cursor,
        limit=query.limit,
        frequency=query.frequency,
        sort_by=query.sort_by,
        default_limit=current_app.config["HABITLOOP_CONFIG"].EXPLORE_DEFAULT_LIMIT,
    )
    return jsonify(page.to_dict())


@bp.post("/loops/<int:loop_id>/react")
@login_required
def react(loop_id: int):
    form = parse_form(ReactionForm, json_body())
    reaction = get_services().explore.react(loop_id, current_user_id(), form.emoji)
    return jsonify({"reaction": reaction.to_dict()})


@bp.delete("/loops/<int:loop_id>/react")
@login_required
def remove_reaction(loop_id: int):
    get_services().explore.remove_reaction(loop_id, current_user_id())
    return jsonify({"success": True})


@bp.post("/loops/<int:loop_id>/clone")
@login_required
def clone(loop_id: int):
    loop = get_services().explore.clone_loop(loop_id, current_user_id())
    return jsonify({"loop": loop.to_dict()}), 201
