from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, login_required, session_user_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-entries", methods=["GET"], endpoint="api_time_entries")
    @login_required
    def api_time_entries():
        user = container.auth_service.current_user(session_user_id())
        rows = container.entry_query_service.list_for_user(user.id)
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/api/time-entries", methods=["POST"], endpoint="api_time_entries_create")
    @login_required
    def api_time_entries_create():
        user = container.auth_service.current_user(session_user_id())
        data = json_body()
        entry = container.admission_service.admit_entry(
            user_id=user.id,
            project_id=data.get("projectId"),
            date=data.get("date"),
            time_spent=data.get("timeSpent"),
        )
        return jsonify(entry.to_dict()), 201

    @app.route("/api/admin/time-entries", methods=["GET"], endpoint="api_admin_time_entries")
    @login_required
    def api_admin_time_entries():
        container.auth_service.require_admin(session_user_id())
        rows = container.entry_query_service.list_all()
        return jsonify([r.to_dict() for r in rows]), 200
