from __future__ import annotations

from flask import Flask, send_file

from ..common.auth import admin_required
from ..common.datetime_utils import now_local
from ..container import Container
from .service import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/checkins.xlsx", methods=["GET"], endpoint="export_checkins")
    @admin_required
    def export_checkins():
        output = container.report_service.export_xlsx()
        return send_file(
            output,
            download_name=f"checkins-{now_local():%Y%m%d}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
