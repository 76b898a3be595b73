from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.money import fmt_money
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_profiles, list_tables

from .container import Container, build_container
from .banking.controller import register as register_banking
from .bulk_payroll.controller import register as register_bulk_payroll
from .clients.controller import register as register_clients
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .permissions.controller import register as register_permissions
from .profiles.controller import register as register_profiles
from .projects.controller import register as register_projects
from .reports.controller import register as register_reports
from .salary_templates.controller import register as register_salary_templates
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"
REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    # templates post plain forms; no CSRF middleware is installed
    app.jinja_env.globals["csrf_token"] = lambda: ""
    app.jinja_env.filters["money"] = fmt_money

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_profiles(db_config)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config)

    app.extensions["container"] = container

    register_profiles(app, container)
    register_permissions(app, container)
    register_clients(app, container)
    register_projects(app, container)
    register_timesheets(app, container)
    register_salary_templates(app, container)
    register_payroll(app, container)
    register_bulk_payroll(app, container)
    register_banking(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app
