from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import admin_required, login_required
from ..common.http import get_json_body
from ..container import Container
from .service import build_signature


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    @app.route("/api/properties/manual-checkin", methods=["POST"], endpoint="manual_checkin")
    @login_required
    def manual_checkin():
        body = get_json_body()
        signature = build_signature(body.get("signatureImage"), body.get("signatureHash"))
        result = service.apply(body.get("shareholderId"), body.get("action"), signature=signature)
        return jsonify(
            {
                "success": True,
                "action": result.action.value,
                "shareholderId": result.shareholder_id,
                "updatedProperties": result.properties_updated,
            }
        )

    @app.route("/api/checkin", methods=["POST"], endpoint="barcode_checkin")
    @login_required
    def barcode_checkin():
        body = get_json_body()
        signature = build_signature(body.get("signatureImage"), body.get("signatureHash"))
        result = service.check_in(body.get("shareholderId"), signature=signature)
        counters = service.meeting_counters(result.meeting_id)
        return jsonify(
            {
                "success": True,
                "shareholderId": result.shareholder_id,
                "propertiesCount": result.properties_updated,
                "meeting": (
                    {
                        "id": counters.meeting_id,
                        "totalShareholders": counters.total_shareholders,
                        "checkedIn": counters.checked_in,
                    }
                    if counters
                    else None
                ),
            }
        )

    @app.route("/api/properties/bulk-uncheckin", methods=["POST"], endpoint="bulk_uncheckin")
    @admin_required
    def bulk_uncheckin():
        updated = service.bulk_uncheck_in()
        return jsonify({"success": True, "updatedCount": updated})
