from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.http import login_required, session_user_id
from ..common.validators import require_int
from ..container import Container


def _optional_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, "", "all"):
        return None
    return require_int(value, name)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/summary", methods=["GET"], endpoint="api_admin_summary")
    @login_required
    def api_admin_summary():
        """Admin rollups. Query: days (number or "all"), userId, projectId."""
        container.auth_service.require_admin(session_user_id())
        summary = container.aggregation_service.build_admin_summary(
            days=_optional_int("days"),
            user_id=_optional_int("userId"),
            project_id=_optional_int("projectId"),
        )
        return jsonify(summary.to_dict()), 200
