"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..core.exceptions import (
    AggregationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RelationNotFoundError,
    StateTransitionError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StateTransitionError, 409),
    (AggregationError, 503),
)


def login_required(view):
    """Session is populated by the external login flow; only ``user_id`` is read here."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def parse_date_arg(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Missing '{name}' parameter")
        return default
    try:
        return parse_iso_date(raw)
    except ValueError as e:
        raise ValidationError(f"'{name}' must be a YYYY-MM-DD date") from e


def parse_user_ids_arg() -> Optional[list[int]]:
    raw = request.args.getlist("user_id")
    if not raw:
        return None
    try:
        return [int(v) for v in raw]
    except ValueError as e:
        raise ValidationError("'user_id' must be an integer") from e


def error_response(e: Exception):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            body = {"success": False, "message": str(e)}
            if getattr(e, "retryable", False):
                body["retryable"] = True
            return jsonify(body), status
    if isinstance(e, RelationNotFoundError):
        logger.warning("%s %s hit a missing relation: %s", request.method, request.path, e)
        return jsonify({"success": False, "message": "This feature is not available", "reason": str(e)}), 503
    logger.error("%s %s failed with an unmapped error", request.method, request.path, exc_info=e)
    return jsonify({"success": False, "message": "Internal server error"}), 500


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(DomainError, error_response)
    app.register_error_handler(RelationNotFoundError, error_response)
