from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import DomainError

# Error kind -> HTTP status.
STATUS_BY_KIND = {
    "MissingFields": 400,
    "InvalidInput": 400,
    "ValidationError": 400,
    "DuplicateName": 400,
    "LocationInUse": 400,
    "AlreadyMarked": 400,
    "OutsideServiceWindow": 403,
    "OutOfRange": 403,
    "MemberNotFound": 404,
    "NotFound": 404,
    "DeviceAlreadyUsed": 429,
    "NoActiveLocation": 500,
}


def error_response(error: DomainError):
    body = {"success": False, "kind": error.kind, "message": str(error), **error.details()}
    return jsonify(body), STATUS_BY_KIND.get(error.kind, 400)


def server_error(message: str):
    return jsonify({"success": False, "message": message}), 500


def admin_required(view):
    """Require a session established by the external authentication service."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return jsonify({"success": False, "message": "Access token required"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed: Iterable[str] = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "admin_id" not in session:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            if session.get("role") not in allowed:
                return jsonify({"success": False, "message": "Insufficient permissions"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
