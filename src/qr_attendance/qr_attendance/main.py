from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_PUBLIC_BASE_URL
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_lecturer, list_tables
from .profiles.controller import register as register_profiles
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass ``container`` to run against other repositories (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PDF_FONT_PATH"] = getattr(settings, "PDF_FONT_PATH", None)
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_lecturer(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            public_base_url=getattr(settings, "PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL),
            late_threshold_minutes=int(getattr(settings, "LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
            enforce_time_window=bool(getattr(settings, "ENFORCE_TIME_WINDOW", True)),
            match_duplicate_by_name=bool(getattr(settings, "MATCH_DUPLICATE_BY_NAME", False)),
        )

    app.extensions["qr_attendance.container"] = container

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        db_ok = container.conn.ping()
        return jsonify({"status": "ok", "database": "ok" if db_ok else "unavailable"}), (200 if db_ok else 503)

    register_profiles(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
