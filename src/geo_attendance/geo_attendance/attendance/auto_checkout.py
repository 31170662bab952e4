from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time, timedelta
from typing import Optional

from ..cache.service import AttendanceCache
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import at_time, parse_hhmm
from ..core.constants import DEFAULT_DAY_END_CUTOFF
from ..core.enums import CheckoutType
from ..core.exceptions import ConfigurationError
from ..departments.model import DepartmentPolicy
from ..departments.repository import DepartmentPolicyRepository
from ..users.repository import EmployeeRepository
from .locks import UserLockRegistry
from .model import AttendanceSession, AutoCheckoutSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def auto_close_cutoff(session: AttendanceSession, policy: DepartmentPolicy, *, day_end: time) -> datetime:
    """When an open session is closed automatically.

    Expected check-out plus the department's allowance. Once the user has asked
    for overtime it is the later of that and the day-end cutoff.
    """
    tz = session.check_in_time.tzinfo
    expected_out = at_time(session.work_date, policy.expected_check_out, tz)
    normal_cutoff = expected_out + timedelta(minutes=policy.auto_checkout_after_minutes)
    if session.overtime_enabled:
        return max(at_time(session.work_date, day_end, tz), normal_cutoff)
    return normal_cutoff


class AutoCheckoutService:
    """Sweep that closes sessions nobody checked out of.

    Safe to run repeatedly: closed sessions are no longer listed, and the
    repository only closes records that are still open.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        policies: DepartmentPolicyRepository,
        *,
        cache: AttendanceCache | None = None,
        clock: Clock | None = None,
        locks: UserLockRegistry | None = None,
        day_end_cutoff: str | time = DEFAULT_DAY_END_CUTOFF,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policies = policies
        self._cache = cache
        self._clock = clock or SystemClock()
        self._locks = locks or UserLockRegistry()
        self._day_end = day_end_cutoff if isinstance(day_end_cutoff, time) else parse_hhmm(day_end_cutoff)

    def _policy_for(self, session: AttendanceSession) -> DepartmentPolicy:
        employee = self._employees.get_by_id(session.user_id)
        if not employee or employee.dept_id is None:
            raise ConfigurationError(f"no department for user {session.user_id}")
        policy = self._policies.get_for_department(employee.dept_id)
        if policy is None:
            raise ConfigurationError(f"no working hours configured for department {employee.dept_id}")
        return policy

    def _close(self, session: AttendanceSession, now: datetime) -> Optional[AttendanceSession]:
        policy = self._policy_for(session)
        cutoff = auto_close_cutoff(session, policy, day_end=self._day_end)
        if now < cutoff:
            return None

        if session.overtime_enabled:
            reason = f"Automatically checked out at {cutoff:%H:%M} after overtime was enabled"
        else:
            reason = (
                f"Automatically checked out {policy.auto_checkout_after_minutes} minutes after "
                f"expected check-out ({policy.expected_check_out:%H:%M})"
            )

        closed = replace(
            session,
            check_out_time=max(cutoff, session.check_in_time),
            checkout_type=CheckoutType.AUTO,
            checkout_reason=reason,
            overtime_minutes=0,
        )
        with self._locks.hold(session.user_id):
            if not self._attendance.update_checkout(closed):
                return None
        return closed

    def run_once(self) -> AutoCheckoutSummary:
        now = self._clock.now()
        summary = AutoCheckoutSummary()

        for session in self._attendance.list_open_sessions():
            try:
                closed = self._close(session, now)
            except Exception:
                logger.exception("auto-checkout failed for attendance=%s user=%s", session.attendance_id, session.user_id)
                summary.failed.append(session.attendance_id)
                continue

            if closed is None:
                summary.skipped.append(session.attendance_id)
                continue

            summary.closed.append(session.attendance_id)
            logger.info(
                "auto-checkout attendance=%s user=%s at=%s",
                session.attendance_id,
                session.user_id,
                closed.check_out_time.isoformat(),
            )
            if self._cache:
                self._cache.on_attendance_write(user_id=session.user_id, dept_id=None)

        if summary.closed or summary.failed:
            logger.info(
                "auto-checkout sweep closed=%d skipped=%d failed=%d",
                len(summary.closed),
                len(summary.skipped),
                len(summary.failed),
            )
        return summary
