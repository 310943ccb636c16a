from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import json_body, login_required, session_user_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    def api_register():
        data = json_body()
        user = container.auth_service.register(username=data.get("username"), password=data.get("password"))
        session.clear()
        session["user_id"] = user.id
        return jsonify(user.to_dict()), 201

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        user = container.auth_service.authenticate(username=data.get("username"), password=data.get("password"))
        session.clear()
        session["user_id"] = user.id
        return jsonify(user.to_dict()), 200

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return "", 200

    @app.route("/api/user", methods=["GET"], endpoint="api_me")
    @login_required
    def api_me():
        user = container.auth_service.current_user(session_user_id())
        return jsonify(user.to_dict()), 200

    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    @login_required
    def api_admin_users():
        container.auth_service.require_admin(session_user_id())
        return jsonify([u.to_dict() for u in container.user_service.list_users()]), 200
