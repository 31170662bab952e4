from __future__ import annotations

from datetime import date, datetime

from ...common.datetime_utils import at_time, minutes_between
from ...core.enums import AttendanceStatus
from ...departments.model import DepartmentPolicy
from ..model import AttendanceSession
from .base import AttendanceStrategy, StatusDecision


class EarlyCheckoutStrategy(AttendanceStrategy):
    """Checkout before the department's expected end of day.

    Too little time worked turns the day into a half day; otherwise the
    check-in status stands. Never accrues overtime.
    """

    def decide_checkin(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> StatusDecision:
        raise NotImplementedError("early leave applies to checkout only")

    def decide_checkout(
        self, *, now: datetime, today: date, policy: DepartmentPolicy, session: AttendanceSession
    ) -> StatusDecision:
        expected = at_time(today, policy.expected_check_out, now.tzinfo)
        early_by = minutes_between(now, expected)
        worked = minutes_between(session.check_in_time, now)
        note = f"Left {early_by} minutes early"
        if worked < policy.half_day_minutes:
            return StatusDecision(status=AttendanceStatus.HALF_DAY, note=note)
        return StatusDecision(status=session.status, note=note)
