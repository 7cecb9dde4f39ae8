from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .activities.controller import register as register_activities
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .participants.controller import register as register_participants

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(threadName)s : %(message)s"


def setup_logging(app: Flask, level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    pkg_logger = logging.getLogger(__package__)
    pkg_logger.setLevel(level.upper())
    if not pkg_logger.handlers:
        pkg_logger.addHandler(handler)

    app.logger.setLevel(logging.DEBUG if app.debug else level.upper())


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    setup_logging(app, str(getattr(settings, "LOG_LEVEL", "INFO")))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            enforce_qr_expiry=bool(getattr(settings, "ENFORCE_QR_EXPIRY", False)),
            qr_max_age_days=int(getattr(settings, "QR_MAX_AGE_DAYS", 30)),
            scan_cooldown_seconds=float(getattr(settings, "SCAN_COOLDOWN_SECONDS", 1.5)),
            default_grace_minutes=int(getattr(settings, "GRACE_PERIOD_MINUTES", 15)),
        )

    register_participants(app, container)
    register_activities(app, container)
    register_attendance(app, container)

    return app
