"""Helpers shared by the Flask controllers."""
from __future__ import annotations

import logging
from functools import wraps

from flask import current_app, jsonify, request, session

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    TransitionConflict,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidStateError, 400),
    (AuthorizationError, 403),
    (TransitionConflict, 409),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "code": "UNAUTHENTICATED", "message": "Please log in first"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def ok(payload: dict | None = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def error_response(e: Exception):
    """Map an exception onto the JSON error taxonomy."""

    if isinstance(e, DomainError):
        for cls, status in _STATUS_BY_ERROR:
            if isinstance(e, cls):
                message = str(e)
                if isinstance(e, InvalidStateError):
                    logger.error("Invalid attendance state: %s", e)
                    if not current_app.config.get("DEBUG", False):
                        message = "Invalid attendance state"
                return jsonify({"success": False, "code": e.code, "message": message}), status

    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"success": False, "code": "INTERNAL_ERROR", "message": "Internal server error"}), 500
