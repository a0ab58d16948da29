from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import current_user, login_required
from ..common.http import get_json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.transfer_service

    @app.route("/api/properties/<int:property_id>/transfer", methods=["POST"], endpoint="transfer_property")
    @login_required
    def transfer_property(property_id: int):
        body = get_json_body()
        user = current_user() or {}
        result = service.transfer(
            property_id,
            new_shareholder_id=body.get("newShareholderId"),
            new_owner_name=body.get("newOwnerName"),
            new_customer_name=body.get("newCustomerName"),
            new_resident_name=body.get("newResidentName"),
            created_by=user.get("email") or user.get("name"),
        )
        return jsonify({"success": True, **result})

    @app.route("/api/properties/<int:property_id>/transfers", methods=["GET"], endpoint="property_transfers")
    @login_required
    def property_transfers(property_id: int):
        return jsonify({"transfers": service.history(property_id)})
