from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def _coordinates(payload: dict) -> tuple:
    def _num(key):
        value = payload.get(key)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"'{key}' must be a number") from e

    return _num("latitude"), _num("longitude")


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        latitude, longitude = _coordinates(request.get_json(silent=True) or {})
        event_id = container.attendance_service.check_in(
            current_user_id(), latitude=latitude, longitude=longitude
        )
        return jsonify({"success": True, "event_id": event_id, "message": "Checked in"}), 201

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        latitude, longitude = _coordinates(request.get_json(silent=True) or {})
        event_id = container.attendance_service.check_out(
            current_user_id(), latitude=latitude, longitude=longitude
        )
        return jsonify({"success": True, "event_id": event_id, "message": "Checked out"}), 201
