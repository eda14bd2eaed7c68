"""Auth routes: signup, login, logout and the current user."""

from __future__ import annotations

from flask import jsonify, session

from ...errors import AuthenticationRequired
from ...extensions import get_services
from ...services.auth import authenticate, create_user, get_user
from ..forms import json_body, parse_form
from . import bp
from .decorators import SESSION_USER_KEY, current_user_id, login_required
from .forms import CredentialsForm, SignupForm


@bp.post("/signup")
def signup():
    form = parse_form(SignupForm, json_body())
    user = create_user(
        email=form.email,
        password=form.password,
        session_factory=get_services().session_factory,
    )
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify({"user": user.to_dict()}), 201


@bp.post("/login")
def login():
    form = parse_form(CredentialsForm, json_body())
    user = authenticate(
        email=form.email,
        password=form.password,
        session_factory=get_services().session_factory,
    )
    if user is None:
        raise AuthenticationRequired("Invalid email or password")
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify({"user": user.to_dict()})


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"success": True})


@bp.get("/me")
@login_required
def me():
    user = get_user(current_user_id(), get_services().session_factory)
    if user is None:
        session.clear()
        raise AuthenticationRequired()
    return jsonify({"user": user.to_dict()})
