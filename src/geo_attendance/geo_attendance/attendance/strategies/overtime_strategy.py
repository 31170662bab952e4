from __future__ import annotations

from datetime import date, datetime

from ...common.datetime_utils import at_time, minutes_between
from ...departments.model import DepartmentPolicy
from ..model import AttendanceSession
from .base import AttendanceStrategy, StatusDecision


class OvertimeStrategy(AttendanceStrategy):
    """Checkout after the expected end; every minute past it counts as overtime."""

    def decide_checkin(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> StatusDecision:
        raise NotImplementedError("overtime applies to checkout only")

    def decide_checkout(
        self, *, now: datetime, today: date, policy: DepartmentPolicy, session: AttendanceSession
    ) -> StatusDecision:
        expected = at_time(today, policy.expected_check_out, now.tzinfo)
        overtime = max(0, minutes_between(expected, now))
        return StatusDecision(
            status=session.status,
            note=session.note,
            overtime_minutes=overtime,
        )
