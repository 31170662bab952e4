from __future__ import annotations

from dataclasses import replace
from datetime import date
from math import degrees
from typing import Optional

from src.geo_attendance.geo_attendance.attendance.model import AttendanceSession
from src.geo_attendance.geo_attendance.core.constants import EARTH_RADIUS_METERS
from src.geo_attendance.geo_attendance.geo.model import OfficeLocation
from src.geo_attendance.geo_attendance.users.model import Employee

STAFF_ID = 1
ADMIN_ID = 2


def lat_offset(meters: float) -> float:
    """Degrees of latitude that span `meters` due north on the haversine sphere."""
    return degrees(meters / EARTH_RADIUS_METERS)


class InMemoryOffices:
    def __init__(self, offices: list[OfficeLocation]):
        self._offices = {o.office_id: o for o in offices}

    def list_active(self):
        return [o for o in self._offices.values() if o.is_active]

    def get_by_id(self, office_id: int) -> Optional[OfficeLocation]:
        return self._offices.get(office_id)

    def soft_delete(self, office_id: int) -> bool:
        office = self._offices.get(office_id)
        if not office:
            return False
        self._offices[office_id] = replace(office, is_active=False)
        return True


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self.by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self.by_id.get(user_id)


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceSession] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceSession]:
        return self.by_id.get(attendance_id)

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self.by_id.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        for r in self.by_id.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def create_checkin(self, session: AttendanceSession) -> int:
        if self.get_for_user_and_date(session.user_id, session.work_date):
            raise RuntimeError("duplicate (user_id, work_date)")
        self._id += 1
        self.by_id[self._id] = replace(session, attendance_id=self._id)
        return self._id

    def update_checkout(self, session: AttendanceSession) -> bool:
        stored = self.by_id.get(session.attendance_id)
        if not stored or not stored.is_open:
            return False
        self.by_id[session.attendance_id] = session
        return True

    def set_overtime_enabled(self, attendance_id: int, enabled: bool) -> bool:
        stored = self.by_id.get(attendance_id)
        if not stored or not stored.is_open:
            return False
        self.by_id[attendance_id] = replace(stored, overtime_enabled=enabled)
        return True

    def list_for_date(self, work_date: date):
        return [r for r in self.by_id.values() if r.work_date == work_date]

    def list_open_sessions(self):
        return [r for r in self.by_id.values() if r.is_open]

    def admin_update_record(self, session: AttendanceSession) -> bool:
        if session.attendance_id not in self.by_id:
            return False
        self.by_id[session.attendance_id] = session
        return True
