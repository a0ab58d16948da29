from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, login_required
from ..common.http import get_json_body
from ..common.serialization import camelize
from ..container import Container
from ..listing.query_builder import listing_query_from_args


def register(app: Flask, container: Container) -> None:
    service = container.shareholder_service

    @app.route("/api/shareholders", methods=["GET"], endpoint="list_shareholders")
    @login_required
    def list_shareholders():
        return jsonify(service.list_shareholders(listing_query_from_args(request.args)))

    @app.route("/api/shareholders", methods=["POST"], endpoint="create_shareholder")
    @login_required
    def create_shareholder():
        created = service.create_shareholder(get_json_body())
        return jsonify({"success": True, "shareholder": camelize(created)}), 201

    @app.route("/api/shareholders/<shareholder_id>", methods=["GET"], endpoint="get_shareholder")
    @login_required
    def get_shareholder(shareholder_id: str):
        return jsonify(service.get_shareholder_details(shareholder_id))

    @app.route("/api/shareholders/<shareholder_id>", methods=["PUT"], endpoint="update_shareholder")
    @login_required
    def update_shareholder(shareholder_id: str):
        updated = service.update_name(shareholder_id, get_json_body().get("name"))
        return jsonify({"success": True, "shareholder": camelize(updated)})

    @app.route("/api/shareholders/<shareholder_id>", methods=["DELETE"], endpoint="delete_shareholder")
    @admin_required
    def delete_shareholder(shareholder_id: str):
        removed = service.delete_shareholder(shareholder_id)
        return jsonify({"success": True, "deletedProperties": removed})

    @app.route("/api/shareholders/<shareholder_id>/comment", methods=["GET"], endpoint="get_comment")
    @login_required
    def get_comment(shareholder_id: str):
        return jsonify({"comment": service.get_comment(shareholder_id)})

    @app.route("/api/shareholders/<shareholder_id>/comment", methods=["POST"], endpoint="set_comment")
    @login_required
    def set_comment(shareholder_id: str):
        comment = service.set_comment(shareholder_id, get_json_body().get("comment"))
        return jsonify({"success": True, "comment": comment})

    # -------- Designee --------
    @app.route("/api/designee", methods=["GET"], endpoint="get_designee")
    @login_required
    def get_designee():
        return jsonify({"designee": service.get_designee(request.args.get("shareholderId"))})

    @app.route("/api/designee", methods=["POST"], endpoint="set_designee")
    @login_required
    def set_designee():
        body = get_json_body()
        designee = service.set_designee(body.get("shareholderId"), body.get("designee"))
        return jsonify({"success": True, "designee": designee})

    @app.route("/api/designee", methods=["PATCH"], endpoint="clear_designee")
    @login_required
    def clear_designee():
        service.clear_designee(get_json_body().get("shareholderId"))
        return jsonify({"success": True, "designee": None})
