from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, redirect, session
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.logging_utils import configure_logging
from .common.responses import fail, status_for
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.exceptions import DomainError, GatewayError
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .employees.controller import register as register_employees
from .reports.controller import register as register_reports
from .routing import LOGIN_ROUTE
from .settings import get_settings_module, load_settings
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)


def _build_default_container(settings) -> Container:
    db_config = getattr(settings, "DB_CONFIG")

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_data(db_config)

    container = build_container(
        db_config=db_config,
        session_days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)),
        require_email_confirmation=bool(getattr(settings, "REQUIRE_EMAIL_CONFIRMATION", False)),
    )

    if bool(getattr(settings, "PRELOAD_STORE", True)):
        try:
            container.ems_store.load_all()
        except GatewayError as e:
            # App still starts; admins can retry with /api/admin/refresh.
            logger.warning("initial data load failed: %s", e)

    return container


def _register_session_hooks(app: Flask, container: Container) -> None:
    @app.before_request
    def restore_auth():
        g.auth = container.new_auth_store()
        g.auth.restore(session.get("access_token"))
        if session.get("access_token") and not g.auth.is_authenticated:
            session.pop("access_token", None)

    @app.teardown_request
    def close_auth(_exc):
        auth = g.pop("auth", None)
        if auth is not None:
            auth.close()


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return fail(str(e), status_for(e))

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error")
        if bool(app.config.get("DEBUG", False)):
            return fail(f"System error: {e}", 500)
        return fail("System error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    logger.info("starting with settings=%s", get_settings_module())

    if container is None:
        container = _build_default_container(settings)
    app.extensions["ems"] = container

    _register_session_hooks(app, container)
    _register_error_handlers(app)

    @app.route("/", endpoint="index")
    def index():
        return redirect(LOGIN_ROUTE)

    register_auth(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_tasks(app, container)
    register_reports(app, container)

    return app


def run() -> None:
    app = create_app()
    app.run(debug=bool(app.config.get("DEBUG", False)))
