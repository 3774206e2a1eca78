from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_STATUS_UPDATE_WORKERS
from .database.bootstrap import apply_schema, list_tables
from .logging_config import setup_logging
from .payroll.controller import register as register_payroll
from .scheduling.controller import register as register_scheduling

logger = structlog.get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", None))

    app = Flask(__name__)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "app_starting",
            settings=settings_module,
            db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema_ready", tables=len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            status_update_workers=int(getattr(settings, "STATUS_UPDATE_WORKERS", DEFAULT_STATUS_UPDATE_WORKERS)),
        )

    register_scheduling(app, container)
    register_payroll(app, container)

    return app
