from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt `container` (e.g. in-memory repositories in tests) to skip
    the MySQL wiring and schema bootstrap.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            config = DBConfig.from_dict(db_config)
            conn = DatabaseConnection.get_instance(config)
            apply_schema(conn, config.database)
            logger.info("schema ready (tables=%d)", len(list_tables(conn)))

        container = build_container(db_config=db_config)

    app.extensions["school_attendance"] = container

    register_users(app, container)
    register_students(app, container)
    register_classes(app, container)
    register_attendance(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app
