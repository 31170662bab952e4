from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.responses import error_response, ok
from ..core.enums import AttendanceType, Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..geo.model import LocationSample
from .model import CheckInRequest, CheckOutRequest


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "code": "unauthenticated", "message": "Please log in to continue"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "code": "unauthenticated", "message": "Please log in to continue"}), 401
            if session.get("role") != Role.ADMIN.value:
                return jsonify({"success": False, "code": "forbidden", "message": "Administrator access required"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _sample(data: dict) -> LocationSample | None:
        if data.get("latitude") is None and data.get("longitude") is None:
            return None
        return LocationSample.from_payload(data, default_timestamp=container.clock.now())

    def _attendance_type(data: dict) -> AttendanceType:
        raw = str(data.get("attendance_type") or AttendanceType.OFFICE.value).lower()
        try:
            return AttendanceType(raw)
        except ValueError:
            raise ValidationError(f"unknown attendance type: {raw!r}")

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    def api_check_in():
        data = _payload()
        try:
            result = container.attendance_service.check_in(
                CheckInRequest(
                    user_id=int(session["user_id"]),
                    sample=_sample(data),
                    attendance_type=_attendance_type(data),
                    reason=data.get("reason"),
                    photo_url=data.get("photo_url"),
                )
            )
        except DomainError as e:
            return error_response(e)
        return ok(result.to_dict(), message="Checked in successfully")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    def api_check_out():
        data = _payload()
        try:
            result = container.attendance_service.check_out(
                CheckOutRequest(
                    user_id=int(session["user_id"]),
                    sample=_sample(data),
                    reason=data.get("reason"),
                    photo_url=data.get("photo_url"),
                )
            )
        except DomainError as e:
            return error_response(e)
        return ok(result.to_dict(), message="Checked out successfully")

    @app.route("/api/attendance/overtime", methods=["POST"], endpoint="api_overtime")
    @login_required
    def api_overtime():
        try:
            record = container.attendance_service.enable_overtime(int(session["user_id"]))
        except DomainError as e:
            return error_response(e)
        return ok({"attendance": record.to_dict()}, message="Overtime enabled")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today")
    @login_required
    def api_today():
        record = container.attendance_service.get_today_record(int(session["user_id"]))
        return ok({"attendance": record.to_dict() if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_history")
    @login_required
    def api_history():
        limit = request.args.get("limit", type=int) or 30
        rows = container.attendance_service.get_history(int(session["user_id"]), limit=max(1, min(limit, 366)))
        return ok({"attendance": [r.to_dict() for r in rows]})

    @app.route("/admin/attendance/live", methods=["GET"], endpoint="admin_attendance_live")
    @admin_required
    def admin_attendance_live():
        rows = container.attendance_service.list_live()
        return ok({"attendance": [r.to_dict() for r in rows]})

    @app.route("/admin/departments/<int:dept_id>/stats", methods=["GET"], endpoint="admin_department_stats")
    @admin_required
    def admin_department_stats(dept_id: int):
        raw_date = request.args.get("date")
        try:
            work_date = parse_iso_date(raw_date) if raw_date else None
        except ValueError:
            return error_response(ValidationError("date must be YYYY-MM-DD"))
        stats = container.attendance_service.department_stats(dept_id, work_date)
        return ok({"stats": stats.to_dict()})

    @app.route("/admin/attendance/<int:attendance_id>/correct", methods=["POST"], endpoint="admin_attendance_correct")
    @admin_required
    def admin_attendance_correct(attendance_id: int):
        try:
            record = container.attendance_service.admin_correct(
                actor_id=int(session["user_id"]),
                attendance_id=attendance_id,
                changes=_payload(),
            )
        except DomainError as e:
            return error_response(e)
        return ok({"attendance": record.to_dict()}, message="Attendance record updated")

    @app.route("/admin/attendance/auto-checkout", methods=["POST"], endpoint="admin_auto_checkout")
    @admin_required
    def admin_auto_checkout():
        summary = container.auto_checkout_service.run_once()
        return ok(summary.to_dict())

    @app.route("/admin/cache/stats", methods=["GET"], endpoint="admin_cache_stats")
    @admin_required
    def admin_cache_stats():
        return ok({"cache": container.cache.stats()})
