from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .claims.controller import register as register_claims
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import (
    DEFAULT_CLAIM_APPROVER_ROLES,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_FINAL_CONFIRMATION_ROLE,
    DEFAULT_MAX_REPORT_DAYS,
)
from .database.bootstrap import apply_schema
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def _roles(raw: Optional[str]) -> frozenset[str]:
    if not raw:
        return DEFAULT_CLAIM_APPROVER_ROLES
    return frozenset(r.strip() for r in raw.split(",") if r.strip())


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
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
            apply_schema(db_config)

        container = build_container(
            db_config=db_config,
            final_confirmation_role=getattr(settings, "FINAL_CONFIRMATION_ROLE", DEFAULT_FINAL_CONFIRMATION_ROLE),
            claim_approver_roles=_roles(getattr(settings, "CLAIM_APPROVER_ROLES", None)),
            fetch_workers=int(getattr(settings, "REPORT_FETCH_WORKERS", DEFAULT_FETCH_WORKERS)),
            max_report_days=int(getattr(settings, "MAX_REPORT_DAYS", DEFAULT_MAX_REPORT_DAYS)),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    register_reports(app, container)
    register_leaves(app, container)
    register_claims(app, container)

    return app
