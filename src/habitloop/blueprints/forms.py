"""Shared helpers for pydantic request forms."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailed

FormT = TypeVar("FormT", bound=BaseModel)


def parse_form(form_cls: type[FormT], payload: Mapping[str, Any] | None) -> FormT:
    """Validate ``payload`` into ``form_cls`` or raise :class:`ValidationFailed`."""

    try:
        return form_cls.model_validate(dict(payload or {}))
    except ValidationError as exc:
        structured: list[dict[str, Any]] = []
        for error in exc.errors(include_url=False):
            loc = error.get("loc", ())
            structured.append(
                {
                    "field": str(loc[0]) if loc else "__root__",
                    "message": error.get("msg", "Invalid value"),
                }
            )
        raise ValidationFailed("Invalid request payload", issues=structured) from exc


def json_body() -> dict[str, Any]:
    """Return the request's JSON object, or an empty dict for an empty body."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return payload
