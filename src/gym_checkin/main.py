from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .database.bootstrap import apply_schema, ensure_demo_gym, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Container | None = None) -> Flask:
    """Build the Flask app.

    Pass a ready container to skip the database wiring (tests do this).
    """
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
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_gym(db_config)

        container = build_container(
            db_config=db_config,
            require_active_gym=bool(getattr(settings, "REQUIRE_ACTIVE_GYM", False)),
            history_limit=int(getattr(settings, "HISTORY_LIMIT", 50)),
        )

    register_attendance(app, container)

    return app
