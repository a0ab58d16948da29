from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, login_required
from ..common.http import get_json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    meetings = container.meeting_service

    @app.route("/api/meetings", methods=["GET"], endpoint="list_meetings")
    @login_required
    def list_meetings():
        return jsonify({"meetings": meetings.list_meetings()})

    @app.route("/api/meetings", methods=["POST"], endpoint="create_meeting")
    @admin_required
    def create_meeting():
        body = get_json_body()
        meeting = meetings.create_meeting(
            year=body.get("year"),
            date=body.get("date"),
            data_source=body.get("dataSource"),
        )
        return jsonify({"success": True, "meeting": meeting}), 201

    @app.route("/api/meetings/<int:meeting_id>", methods=["DELETE"], endpoint="delete_meeting")
    @admin_required
    def delete_meeting(meeting_id: int):
        removed = meetings.delete_meeting(meeting_id)
        return jsonify({"success": True, "deleted": removed})

    @app.route("/api/meetings/stats", methods=["GET"], endpoint="meeting_stats")
    @login_required
    def meeting_stats():
        return jsonify(meetings.get_stats())

    @app.route("/api/upload", methods=["POST"], endpoint="upload_shareholders")
    @admin_required
    def upload_shareholders():
        upload = request.files.get("file")
        meeting_id = request.form.get("meetingId")
        if upload is None or not upload.filename or not meeting_id:
            raise ValidationError("Missing required fields")

        summary = container.import_service.import_upload(meeting_id, upload.stream, upload.filename)
        return jsonify({"success": True, **summary})

    @app.route("/api/changes", methods=["GET"], endpoint="meeting_changes")
    @admin_required
    def meeting_changes():
        meeting_id = (request.args.get("meetingId") or "").strip()
        if not meeting_id:
            raise ValidationError("Meeting ID is required")
        return jsonify(container.snapshot_service.latest_changes(meeting_id))
