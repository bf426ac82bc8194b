from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .children.controller import register as register_children
from .common.logging_setup import configure_logging
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .notifications.controller import register as register_notifications
from .pickup.controller import register as register_pickup

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> Flask:
    """App factory. Tests pass a ready container; otherwise MySQL is wired from settings."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(settings)

    app.extensions["kindergarten"] = container

    register_attendance(app, container)
    register_pickup(app, container)
    register_children(app, container)
    register_notifications(app, container)

    return app
