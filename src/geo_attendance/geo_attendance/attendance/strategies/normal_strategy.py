from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from ...departments.model import DepartmentPolicy
from ..model import AttendanceSession
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_checkin(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(
        self, *, now: datetime, today: date, policy: DepartmentPolicy, session: AttendanceSession
    ) -> StatusDecision:
        return StatusDecision(status=session.status)
