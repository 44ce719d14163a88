from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..users.model import AuthContext

logger = logging.getLogger(__name__)


def to_json(value):
    """Turn dataclasses, Decimals, dates and enums into JSON-friendly values."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        # Computed totals are properties, not fields.
        if isinstance(getattr(type(value), "total_amount", None), property):
            data["total_amount"] = to_json(value.total_amount)
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(data=None, status: int = 200):
    return jsonify({"success": True, "data": to_json(data)}), status


def current_auth() -> AuthContext:
    """Build the caller's AuthContext from the session set by the login collaborator."""

    user_id = session.get("user_id")
    if user_id is None:
        raise AuthorizationError("Login required")
    try:
        role = Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Unknown role")
    return AuthContext(user_id=int(user_id), role=role, is_active=bool(session.get("is_active", True)))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "code": "LOGIN_REQUIRED", "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "code": "LOGIN_REQUIRED", "message": "Login required"}), 401
        if session.get("role") != Role.ADMIN.value:
            err = AuthorizationError("Admin access required")
            return jsonify({"success": False, "code": err.code, "message": str(err)}), err.http_status
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def int_arg(name: str, default=None):
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "code": e.code, "message": str(e)}), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404 routes, 405 methods).
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "code": "INTERNAL_ERROR", "message": "Internal server error"}), 500
