from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import Container, build_container, connect
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, ensure_admin_account, list_tables
from .logging_config import setup_logging

from .courses.controller import register as register_courses
from .requests.controller import register as register_requests
from .timetables.controller import register as register_timetables
from .users.controller import register as register_users

log = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    session_days = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.config["SESSION_DAYS"] = session_days
    app.permanent_session_lifetime = timedelta(days=session_days)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        log.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        conn = connect(db_config)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(conn, database=db_config["database"], schema_path=schema_path)
            log.info("schema ready (tables=%d)", len(list_tables(conn)))

        container = build_container(conn=conn)

        admin_email = getattr(settings, "ADMIN_EMAIL", None)
        admin_password = getattr(settings, "ADMIN_PASSWORD", None)
        if admin_email and admin_password:
            ensure_admin_account(
                container.identity, container.users_repo, email=admin_email, password=admin_password
            )

    register_error_handlers(app)
    register_users(app, container)
    register_courses(app, container)
    register_timetables(app, container)
    register_requests(app, container)

    return app
