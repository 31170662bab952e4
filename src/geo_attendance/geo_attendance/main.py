from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.responses import error_response
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .geo.controller import register as register_location

logger = logging.getLogger(__name__)


def register_routes(app: Flask, container: Container) -> None:
    register_attendance(app, container)
    register_location(app, container)

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(exc)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if auto_init_db:
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if auto_seed_db:
        seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
        apply_seed_sql(db_config, seed_path=seed_path)
        logger.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        geofence=getattr(settings, "GEOFENCE", None),
        department_policies=getattr(settings, "DEPARTMENT_POLICIES", None),
    )
    register_routes(app, container)

    return app
