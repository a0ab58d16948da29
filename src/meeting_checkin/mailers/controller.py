from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.auth import admin_required, login_required
from ..common.http import get_json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    storage = container.mailer_storage

    @app.route("/api/generate-local-pdfs", methods=["POST"], endpoint="generate_mailers")
    @admin_required
    def generate_mailers():
        body = get_json_body()
        result = container.mailer_service.generate(body.get("meetingId"), batch_size=body.get("batchSize"))
        return jsonify({"success": True, **result})

    @app.route("/api/generated-pdfs", methods=["GET"], endpoint="list_generated_pdfs")
    @login_required
    def list_generated_pdfs():
        meeting_id = request.args.get("meetingId")
        if not meeting_id:
            raise ValidationError("Meeting ID is required")
        return jsonify({"files": storage.list_files(meeting_id)})

    @app.route("/api/generated-pdfs/<meeting_id>/<file_name>", methods=["GET"], endpoint="download_generated_pdf")
    @login_required
    def download_generated_pdf(meeting_id: str, file_name: str):
        path = storage.existing(meeting_id, file_name)
        return send_file(path, mimetype="application/pdf", as_attachment=True, download_name=path.name)

    @app.route("/api/generated-pdfs", methods=["DELETE"], endpoint="delete_generated_pdfs")
    @admin_required
    def delete_generated_pdfs():
        body = get_json_body()
        meeting_id = body.get("meetingId")
        if not meeting_id:
            raise ValidationError("Meeting ID is required")
        removed = storage.delete(meeting_id, body.get("fileName"))
        return jsonify({"success": True, "deleted": removed})
