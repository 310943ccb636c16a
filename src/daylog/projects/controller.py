from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", methods=["GET"], endpoint="api_projects")
    @login_required
    def api_projects():
        return jsonify([p.to_dict() for p in container.project_service.list_active()]), 200
