from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from loguru import logger

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .calendar.controller import register as register_calendar
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .reschedule.controller import register as register_reschedule

_SETTING_NAMES = (
    "LATE_GRACE_MINUTES",
    "QR_CODE_TTL_HOURS",
    "RESCHEDULE_HORIZON_WEEKS",
    "ALLOW_MULTIPLE_PENDING_RESCHEDULES",
    "HOLIDAY_API_KEY",
    "HOLIDAY_API_URL",
    "HOLIDAY_API_TIMEOUT",
)


def create_app(container: Container | None = None) -> Flask:
    """Build the Flask app; pass a container to skip MySQL wiring (tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    for name in _SETTING_NAMES:
        if hasattr(settings, name):
            app.config[name] = getattr(settings, name)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings={} db={}@{}:{}/{}",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(conn, schema_path=schema_path)
            logger.info("Schema ready (tables={})", len(list_tables(conn)))

        container = build_container(db_config=db_config, settings=app.config)

    register_calendar(app, container)
    register_attendance(app, container)
    register_reschedule(app, container)

    return app
