"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps

from flask import jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConcurrencyConflict,
    ConfigurationError,
    DomainError,
    RecordNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (RecordNotFound, 404),
    (ConcurrencyConflict, 409),
    (ConfigurationError, 422),
)


@dataclass(frozen=True)
class Identity:
    employee_id: int
    role: Role


def current_identity() -> Identity:
    """Caller identity as forwarded by the upstream auth layer."""

    raw_id = request.headers.get("X-Employee-Id", "")
    raw_role = request.headers.get("X-Role", "")
    try:
        return Identity(employee_id=int(raw_id), role=Role(raw_role.strip().upper()))
    except ValueError:
        raise AuthorizationError("Missing or invalid caller identity")


def error_response(e: Exception):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return jsonify({"success": False, "message": str(e)}), status
    if isinstance(e, DomainError):
        return jsonify({"success": False, "message": str(e)}), 400
    logger.exception("[api] unexpected error on %s %s", request.method, request.path)
    return jsonify({"success": False, "message": "Internal server error"}), 500


def json_api(view):
    """Turn domain errors raised by a view into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except Exception as e:
            return error_response(e)

    return wrapper


def require_admin(identity: Identity) -> None:
    if identity.role != Role.ADMIN:
        raise AuthorizationError("Administrator role required")


def require_self_or_admin(identity: Identity, employee_id: int) -> None:
    if identity.role != Role.ADMIN and identity.employee_id != int(employee_id):
        raise AuthorizationError("You can only access your own records")


def to_json(value):
    """Dates as ISO strings, decimals as 2-dp strings, enums as their value."""

    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    return value
