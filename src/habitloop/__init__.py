"""HabitLoop application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "habitloop.blueprints.auth"
    yield "habitloop.blueprints.loops"
    yield "habitloop.blueprints.explore"
    yield "habitloop.blueprints.cron"


def create_app(config_name: str | None = None, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["HABITLOOP_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    # Imported lazily so that importing model classes alone stays lightweight.
    from .extensions import init_app as init_extensions

    init_extensions(app)
    _register_blueprints(app)

    from . import cli

    cli.init_app(app)

    if config_obj.ENABLE_SCHEDULER and not config_obj.TESTING:
        from .scheduler import create_scheduler

        app.extensions["habitloop_scheduler"] = create_scheduler(app, auto_start=True)

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
