from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.responses import error_response, ok
from ..core.exceptions import DomainError
from ..container import Container
from .model import LocationSample


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "code": "unauthenticated", "message": "Please log in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _sample() -> LocationSample:
        data = request.get_json(silent=True) or {}
        return LocationSample.from_payload(data, default_timestamp=container.clock.now())

    @app.route("/api/location/validate", methods=["POST"], endpoint="api_location_validate")
    @login_required
    def api_location_validate():
        """Dry run of the check-in location rules; nothing is recorded."""
        try:
            sample = _sample()
        except DomainError as e:
            return error_response(e)
        result = container.location_service.validate(sample)
        anomaly = container.location_service.preview_anomalies(int(session["user_id"]), sample)
        return ok({"validation": result.to_dict(), "anomaly": anomaly.to_dict()})

    @app.route("/api/location/detect", methods=["POST"], endpoint="api_location_detect")
    @login_required
    def api_location_detect():
        try:
            sample = _sample()
        except DomainError as e:
            return error_response(e)
        detection = container.location_service.detect_office(sample)
        return ok({"detection": detection.to_dict()})
