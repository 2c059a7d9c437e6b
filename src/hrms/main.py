from __future__ import annotations

import atexit
import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .cards.controller import register as register_cards
from .common.logging import configure_logging, get_logger
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .employees.controller import register as register_employees
from .jobs.cli import jobs_cli
from .jobs.scheduler import start_scheduler
from .leaves.controller import register as register_leaves
from .organization.controller import register as register_organization
from .payroll.controller import register as register_payroll
from .payslips.controller import register as register_payslips
from .performance.controller import register as register_performance
from .settings import get_settings_module
from .travel_expenses.controller import register as register_travel_expenses
from .web.errors import register_error_handlers

logger = get_logger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_MB", 5)) * 1024 * 1024 * 2
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")
        container = build_container(db_config=db_config, settings=settings)

    app.extensions["hrms"] = container
    register_error_handlers(app)

    register_auth(app, container)
    register_employees(app, container)
    register_organization(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_payslips(app, container)
    register_travel_expenses(app, container)
    register_performance(app, container)
    register_cards(app, container)
    register_dashboard(app, container)
    app.cli.add_command(jobs_cli)

    if bool(getattr(settings, "SCHEDULER_ENABLED", False)):
        scheduler = start_scheduler(
            container.job_service,
            timezone=getattr(settings, "SCHEDULER_TIMEZONE", "Asia/Kolkata"),
            hour=int(getattr(settings, "SCHEDULER_HOUR", 0)),
            minute=int(getattr(settings, "SCHEDULER_MINUTE", 0)),
        )
        app.extensions["hrms_scheduler"] = scheduler
        atexit.register(scheduler.shutdown, wait=False)

    return app
