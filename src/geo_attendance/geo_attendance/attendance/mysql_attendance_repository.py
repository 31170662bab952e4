from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, AttendanceType, CheckoutType, RiskLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.model import Coordinates
from .model import AttendanceSession
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time, status, attendance_type,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng, office_id, distance_meters,
    validation_confidence, photo_url_in, photo_url_out, reason, checkout_reason,
    overtime_minutes, overtime_enabled, checkout_type, risk_level, anomaly_reasons, note
"""


def _coords(lat: Any, lng: Any) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    return Coordinates(float(lat), float(lng))


def _to_session(r: Dict[str, Any]) -> AttendanceSession:
    return AttendanceSession(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        attendance_type=AttendanceType(r.get("attendance_type") or AttendanceType.OFFICE.value),
        check_in_location=_coords(r.get("check_in_lat"), r.get("check_in_lng")),
        check_out_location=_coords(r.get("check_out_lat"), r.get("check_out_lng")),
        office_id=r.get("office_id"),
        distance_meters=float(r["distance_meters"]) if r.get("distance_meters") is not None else None,
        validation_confidence=(
            float(r["validation_confidence"]) if r.get("validation_confidence") is not None else None
        ),
        photo_url_in=r.get("photo_url_in"),
        photo_url_out=r.get("photo_url_out"),
        reason=r.get("reason"),
        checkout_reason=r.get("checkout_reason"),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        overtime_enabled=bool(r.get("overtime_enabled")),
        checkout_type=CheckoutType(r["checkout_type"]) if r.get("checkout_type") else None,
        risk_level=RiskLevel(r.get("risk_level") or RiskLevel.LOW.value),
        anomaly_reasons=tuple(json.loads(r["anomaly_reasons"])) if r.get("anomaly_reasons") else (),
        note=r.get("note"),
    )


def _lat(c: Optional[Coordinates]) -> Optional[float]:
    return c.latitude if c else None


def _lng(c: Optional[Coordinates]) -> Optional[float]:
    return c.longitude if c else None


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_checkin(self, session: AttendanceSession) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, check_in_time, status, attendance_type,
                    check_in_lat, check_in_lng, office_id, distance_meters, validation_confidence,
                    photo_url_in, reason, risk_level, anomaly_reasons, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.user_id,
                    session.work_date,
                    session.check_in_time,
                    session.status.value,
                    session.attendance_type.value,
                    _lat(session.check_in_location),
                    _lng(session.check_in_location),
                    session.office_id,
                    session.distance_meters,
                    session.validation_confidence,
                    session.photo_url_in,
                    session.reason,
                    session.risk_level.value,
                    json.dumps(list(session.anomaly_reasons)),
                    session.note,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(self, session: AttendanceSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_lat=%s, check_out_lng=%s, status=%s,
                    photo_url_out=%s, checkout_reason=%s, overtime_minutes=%s, checkout_type=%s,
                    risk_level=%s, anomaly_reasons=%s, note=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    session.check_out_time,
                    _lat(session.check_out_location),
                    _lng(session.check_out_location),
                    session.status.value,
                    session.photo_url_out,
                    session.checkout_reason,
                    int(session.overtime_minutes),
                    session.checkout_type.value if session.checkout_type else None,
                    session.risk_level.value,
                    json.dumps(list(session.anomaly_reasons)),
                    session.note,
                    session.attendance_id,
                ),
            )
            return cur.rowcount > 0

    def set_overtime_enabled(self, attendance_id: int, enabled: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET overtime_enabled=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (1 if enabled else 0, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_date(self, work_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY check_in_time ASC, attendance_id ASC
                """,
                (work_date,),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_open_sessions(self) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE check_out_time IS NULL
                ORDER BY work_date ASC, attendance_id ASC
                """
            )
            return [_to_session(r) for r in fetchall(cur)]

    def admin_update_record(self, session: AttendanceSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, attendance_type=%s,
                    overtime_minutes=%s, overtime_enabled=%s, checkout_type=%s,
                    reason=%s, checkout_reason=%s, note=%s
                WHERE attendance_id=%s
                """,
                (
                    session.check_in_time,
                    session.check_out_time,
                    session.status.value,
                    session.attendance_type.value,
                    int(session.overtime_minutes),
                    1 if session.overtime_enabled else 0,
                    session.checkout_type.value if session.checkout_type else None,
                    session.reason,
                    session.checkout_reason,
                    session.note,
                    int(session.attendance_id),
                ),
            )
            return cur.rowcount > 0
