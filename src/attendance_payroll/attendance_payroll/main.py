from __future__ import annotations

import importlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .advances.controller import register as register_advances
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema
from .jobs.controller import register as register_jobs
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .scheduler import build_scheduler

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    timezone = getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s tz=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        timezone,
    )

    auto_close_time = datetime.strptime(getattr(settings, "AUTO_CLOSE_TIME", "23:00"), "%H:%M").time()

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)

        container = build_container(
            db_config=db_config,
            timezone=timezone,
            auto_close_time=auto_close_time,
            report_job_workers=int(getattr(settings, "REPORT_JOB_WORKERS", 2)),
        )

    register_attendance(app, container)
    register_payroll(app, container)
    register_advances(app, container)
    register_leaves(app, container)
    register_jobs(app, container)

    if bool(getattr(settings, "ENABLE_SCHEDULERS", False)):
        scheduler = build_scheduler(container, timezone=timezone, auto_close_time=auto_close_time)
        scheduler.start()
        app.extensions["scheduler"] = scheduler

    return app
