from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .checkin.controller import register as register_checkin
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.controller import register as register_database
from .database.orm import db
from .identity.controller import register as register_identity
from .mailers.controller import register as register_mailers
from .meetings.controller import register as register_meetings
from .progress.controller import register as register_progress
from .properties.controller import register as register_properties
from .reports.controller import register as register_reports
from .shareholders.controller import register as register_shareholders
from .transfers.controller import register as register_transfers
from .undo_requests.controller import register as register_undo_requests

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
MAX_UPLOAD_BYTES = 20 * 1024 * 1024

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = dict(getattr(settings, "DB_CONFIG"))
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SQLALCHEMY_DATABASE_URI"] = getattr(settings, "SQLALCHEMY_DATABASE_URI")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    db.init_app(app)

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

    if container is None:
        container = build_container(
            db_config=db_config,
            keycloak={
                "issuer": getattr(settings, "KEYCLOAK_ISSUER"),
                "realm": getattr(settings, "KEYCLOAK_REALM"),
                "client_id": getattr(settings, "KEYCLOAK_CLIENT_ID"),
                "client_secret": getattr(settings, "KEYCLOAK_CLIENT_SECRET"),
            },
            mailer_dir=getattr(settings, "MAILER_DIR"),
        )
    app.extensions["meeting_checkin"] = container

    register_error_handlers(app)
    register_identity(app, container)
    register_shareholders(app, container)
    register_properties(app, container)
    register_checkin(app, container)
    register_transfers(app, container)
    register_meetings(app, container)
    register_undo_requests(app, container)
    register_mailers(app, container)
    register_reports(app, container)
    register_progress(app, container)
    register_database(app, container)

    return app
