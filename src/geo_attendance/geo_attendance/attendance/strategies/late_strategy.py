from __future__ import annotations

from datetime import date, datetime

from ...common.datetime_utils import at_time, minutes_between
from ...core.enums import AttendanceStatus
from ...departments.model import DepartmentPolicy
from ..model import AttendanceSession
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after expected start plus the grace period."""

    def decide_checkin(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> StatusDecision:
        expected = at_time(today, policy.expected_check_in, now.tzinfo)
        late_by = minutes_between(expected, now)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {late_by} minutes")

    def decide_checkout(
        self, *, now: datetime, today: date, policy: DepartmentPolicy, session: AttendanceSession
    ) -> StatusDecision:
        return StatusDecision(status=session.status, note=session.note)
