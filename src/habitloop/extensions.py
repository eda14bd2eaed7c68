"""Database, service and error-handler wiring for the Flask app."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app, jsonify
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException

from .config import BaseConfig
from .errors import HabitLoopError
from .infra.database import SessionFactory, bootstrap_database
from .logging_config import get_logger
from .services.checkins import CheckInService
from .services.explore import ExploreService
from .services.loops import LoopService

logger = get_logger("extensions")

EXTENSION_KEY = "habitloop"


@dataclass
class AppServices:
    """Per-application singletons; services are stateless apart from the engine."""

    engine: Engine
    session_factory: SessionFactory
    loops: LoopService
    check_ins: CheckInService
    explore: ExploreService


def init_app(app: Flask) -> AppServices:
    """Initialize the SQLModel engine and services using the app's configuration."""

    config: BaseConfig = app.config["HABITLOOP_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    services = AppServices(
        engine=engine,
        session_factory=session_factory,
        loops=LoopService(session_factory),
        check_ins=CheckInService(session_factory),
        explore=ExploreService(session_factory),
    )
    app.extensions[EXTENSION_KEY] = services

    @app.errorhandler(HabitLoopError)
    def _handle_domain_error(error: HabitLoopError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(error: HTTPException):
        payload = {"error": (error.name or "error").lower().replace(" ", "_"), "message": error.description}
        return jsonify(payload), error.code or 500

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover - last-resort handler
        logger.error("Unhandled error", exc_info=error)
        return jsonify({"error": "internal_error", "message": "Something went wrong"}), 500

    return services


def get_services() -> AppServices:
    """Return the services bound to the current application."""

    services = current_app.extensions.get(EXTENSION_KEY)
    if services is None:  # pragma: no cover - guarded by create_app
        raise RuntimeError("HabitLoop extensions not initialized")
    return services
