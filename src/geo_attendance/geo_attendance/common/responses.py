from __future__ import annotations

from flask import jsonify

from ..core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    DomainError,
    LocationRejectedError,
    NotFoundError,
)


def error_status(exc: DomainError) -> int:
    if isinstance(exc, ConfigurationError):
        return 422
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthorizationError):
        return 403
    if exc.code == "already_checked_in":
        return 409
    return 400


def error_response(exc: DomainError):
    body = {
        "success": False,
        "code": exc.code,
        "message": str(exc),
        "recommendations": list(exc.recommendations) if isinstance(exc, LocationRejectedError) else [],
    }
    return jsonify(body), error_status(exc)


def ok(payload: dict | None = None, *, message: str | None = None, status: int = 200):
    body = {"success": True}
    if message:
        body["message"] = message
    if payload:
        body.update(payload)
    return jsonify(body), status
