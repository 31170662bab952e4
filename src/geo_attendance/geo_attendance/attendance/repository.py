from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def create_checkin(self, session: AttendanceSession) -> int:
        """Insert a new open session; returns its id. Unique per (user_id, work_date)."""

        raise NotImplementedError

    def update_checkout(self, session: AttendanceSession) -> bool:
        """Close a session. Only succeeds while the stored record is still open."""

        raise NotImplementedError

    def set_overtime_enabled(self, attendance_id: int, enabled: bool) -> bool:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_open_sessions(self) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def admin_update_record(self, session: AttendanceSession) -> bool:
        """Admin-only override of any stored field."""

        raise NotImplementedError
