"""Session helpers for authenticated endpoints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, session

from ...errors import AuthenticationRequired

F = TypeVar("F", bound=Callable[..., Any])

SESSION_USER_KEY = "user_id"


def login_required(view: F) -> F:
    """Reject the request with 401 unless the session carries a user id."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any):
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            raise AuthenticationRequired()
        g.user_id = int(user_id)
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


def current_user_id() -> int:
    return g.user_id
