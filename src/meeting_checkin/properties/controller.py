from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import login_required
from ..common.http import get_json_body
from ..common.serialization import camelize
from ..container import Container
from ..listing.query_builder import listing_query_from_args


def register(app: Flask, container: Container) -> None:
    service = container.property_service

    @app.route("/api/properties", methods=["GET"], endpoint="list_properties")
    @login_required
    def list_properties():
        return jsonify(service.list_properties(listing_query_from_args(request.args)))

    @app.route("/api/properties", methods=["POST"], endpoint="create_property")
    @login_required
    def create_property():
        created = service.create_property(get_json_body())
        return jsonify(camelize(created)), 201

    @app.route("/api/properties/<int:property_id>", methods=["GET"], endpoint="get_property")
    @login_required
    def get_property(property_id: int):
        return jsonify(camelize(service.get_property(property_id)))

    @app.route("/api/properties/<int:property_id>", methods=["PUT"], endpoint="update_property")
    @login_required
    def update_property(property_id: int):
        return jsonify(camelize(service.update_property(property_id, get_json_body())))

    @app.route("/api/properties/<int:property_id>", methods=["DELETE"], endpoint="delete_property")
    @login_required
    def delete_property(property_id: int):
        service.delete_property(property_id)
        return jsonify({"success": True})
