from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
)


def error_response(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def current_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def _role_required(role: Role) -> Callable:
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Authentication required", 401)
            if session.get("role") != role.value:
                return error_response("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = _role_required(Role.ADMIN)
student_required = _role_required(Role.STUDENT)


def json_endpoint(failure_message: str) -> Callable:
    """Map domain errors to 4xx JSON and anything else to a logged, generic 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                for exc_type, status in _STATUS_BY_ERROR:
                    if isinstance(e, exc_type):
                        return error_response(str(e), status)
                return error_response(str(e), 400)
            except Exception:
                logger.exception("%s failed", view.__name__)
                return error_response(failure_message, 500)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
