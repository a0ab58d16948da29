from __future__ import annotations

from flask import Flask, Response, jsonify, stream_with_context

from ..common.auth import login_required
from ..common.http import get_json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/progress", methods=["GET"], endpoint="progress_stream")
    @login_required
    def progress_stream():
        return Response(
            stream_with_context(container.progress.stream()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.route("/api/progress", methods=["POST"], endpoint="progress_publish")
    @login_required
    def progress_publish():
        delivered = container.progress.publish(get_json_body())
        return jsonify({"success": True, "clients": delivered})
