from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AdmissionBusyError,
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def session_user_id():
    value = session.get("user_id")
    return int(value) if value is not None else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    """Map domain errors raised by services to JSON responses."""

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        body = {"message": str(e)}
        if e.field:
            body["field"] = e.field
        return jsonify(body), 400

    @app.errorhandler(CapacityExceededError)
    def _capacity(e: CapacityExceededError):
        return jsonify({"message": str(e), "currentTotal": float(e.current_total), "date": e.date}), 400

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"message": str(e)}), 400

    @app.errorhandler(AdmissionBusyError)
    def _busy(e: AdmissionBusyError):
        return jsonify({"message": str(e)}), 503, {"Retry-After": "1"}

    @app.errorhandler(UnauthorizedError)
    def _unauthorized(e: UnauthorizedError):
        return jsonify({"message": str(e)}), 401

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"message": str(e)}), 404

    @app.errorhandler(Exception)
    def _internal(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled_error", path=request.path)
        return jsonify({"message": "Internal server error"}), 500
