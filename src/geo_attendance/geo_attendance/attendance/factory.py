from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..common.datetime_utils import at_time
from ..departments.model import DepartmentPolicy
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyCheckoutStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.overtime_strategy import OvertimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> AttendanceStrategy:
        expected = at_time(today, policy.expected_check_in, now.tzinfo)
        if now <= expected + timedelta(minutes=policy.late_grace_minutes):
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, *, now: datetime, today: date, policy: DepartmentPolicy) -> AttendanceStrategy:
        expected = at_time(today, policy.expected_check_out, now.tzinfo)
        if now < expected:
            return EarlyCheckoutStrategy()
        if now > expected:
            return OvertimeStrategy()
        return NormalStrategy()
