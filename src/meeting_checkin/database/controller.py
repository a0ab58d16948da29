from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.auth import admin_required
from ..container import Container
from .bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/migrate", methods=["POST"], endpoint="migrate")
    @admin_required
    def migrate():
        statements = apply_schema(container.db_config)
        tables = list_tables(container.db_config)
        logger.info("Migration run: %d statements, %d tables", statements, len(tables))
        return jsonify({"success": True, "statements": statements, "tables": sorted(tables)})
