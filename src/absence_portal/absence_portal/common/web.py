from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    IdentityError,
    RemoteFailure,
    ValidationError,
)

log = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."


def error(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def current_role() -> Role:
    return Role(session["role"])


def payload() -> dict:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def object_list(data: dict, key: str) -> list[dict]:
    """``data[key]`` as a list of JSON objects; a missing key is an empty list."""
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ValidationError(f"{key} must be a list of objects")
    return items


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return error("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "uid" not in session:
                return error("Please sign in to continue", 401)
            if session.get("role") not in allowed:
                return error("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return error(str(e), 409, subject=e.subject, time=e.time)

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return error(str(e), 400)

    @app.errorhandler(IdentityError)
    def _identity(e: IdentityError):
        return error(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return error(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return error(str(e), 403)

    @app.errorhandler(RemoteFailure)
    def _remote(e: RemoteFailure):
        log.error("remote failure on %s %s: %s", request.method, request.path, e)
        return error(GENERIC_FAILURE, 503)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return error(str(e), 400)
