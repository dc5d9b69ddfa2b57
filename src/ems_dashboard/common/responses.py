from __future__ import annotations

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    GatewayError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (GatewayError, 502),
)


def ok(status: int = 200, **data):
    return jsonify({"success": True, **data}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def json_body() -> dict:
    """Request payload from JSON or a submitted form."""

    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
