from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.auth import SESSION_KEY, admin_required, current_user
from ..common.http import get_json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = get_json_body()
        user = container.auth_service.login(body.get("username"), body.get("password"))
        session.clear()
        session[SESSION_KEY] = user
        return jsonify({"success": True, "user": user})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def auth_session():
        return jsonify({"user": current_user()})

    # -------- Admin user management --------
    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify(container.user_admin_service.list_users())

    @app.route("/api/create-employee", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        body = get_json_body()
        created = container.user_admin_service.create_employee(
            full_name=body.get("fullName"),
            email=body.get("email"),
            role=body.get("role"),
        )
        return jsonify({"success": True, **created}), 201

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: str):
        container.user_admin_service.delete_user(user_id)
        return jsonify({"success": True})

    @app.route("/api/users/<user_id>/reset-password", methods=["POST"], endpoint="reset_user_password")
    @admin_required
    def reset_user_password(user_id: str):
        container.user_admin_service.reset_password(user_id)
        return jsonify({"success": True})
