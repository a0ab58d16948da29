from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_user, login_required
from ..common.http import get_json_body
from ..common.serialization import camelize
from ..container import Container


def _actor() -> str:
    user = current_user() or {}
    return str(user.get("email") or user.get("name") or "")


def register(app: Flask, container: Container) -> None:
    service = container.undo_request_service

    @app.route("/api/undo-requests", methods=["POST"], endpoint="create_undo_request")
    @login_required
    def create_undo_request():
        body = get_json_body()
        created = service.create_request(
            shareholder_id=body.get("shareholderId"),
            shareholder_name=body.get("shareholderName"),
            requested_by=_actor(),
            reason=body.get("reason"),
        )
        return jsonify({"success": True, "request": camelize(created)}), 201

    @app.route("/api/undo-requests", methods=["GET"], endpoint="list_undo_requests")
    @admin_required
    def list_undo_requests():
        requests_ = service.list_requests(request.args.get("status"))
        return jsonify({"requests": [camelize(r) for r in requests_]})

    @app.route("/api/undo-requests/<int:request_id>", methods=["PUT"], endpoint="decide_undo_request")
    @admin_required
    def decide_undo_request(request_id: int):
        decided = service.decide(request_id=request_id, action=get_json_body().get("action"), admin=_actor())
        return jsonify({"success": True, "request": camelize(decided)})
