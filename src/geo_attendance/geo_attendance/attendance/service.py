from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..cache.service import AttendanceCache
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import align_tz, at_time, parse_iso_datetime
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_OFFSITE_CHECKOUT_DISTANCE_METERS
from ..core.enums import AttendanceStatus, AttendanceType, CheckoutType, ValidationPath
from ..core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    LocationRejectedError,
    NotFoundError,
    PolicyViolationError,
    ValidationError,
)
from ..departments.model import DepartmentPolicy
from ..departments.repository import DepartmentPolicyRepository
from ..geo.distance import distance_meters
from ..geo.model import AnomalyReport, LocationSample, ValidationResult
from ..geo.service import LocationService
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .factory import AttendanceStrategyFactory
from .locks import UserLockRegistry
from .model import AttendanceResult, AttendanceSession, CheckInRequest, CheckOutRequest, DepartmentDayStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _as_datetime(value: Any) -> datetime:
    return value if isinstance(value, datetime) else parse_iso_datetime(str(value))


def _as_minutes(value: Any) -> int:
    minutes = int(value)
    if minutes < 0:
        raise ValueError("must not be negative")
    return minutes


def _optional(convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: None if value in (None, "") else convert(value)


_CORRECTABLE_FIELDS: dict[str, Callable[[Any], Any]] = {
    "check_in_time": _as_datetime,
    "check_out_time": _optional(_as_datetime),
    "status": AttendanceStatus,
    "attendance_type": AttendanceType,
    "overtime_minutes": _as_minutes,
    "overtime_enabled": bool,
    "checkout_type": _optional(CheckoutType),
    "reason": optional_text,
    "checkout_reason": optional_text,
    "note": optional_text,
}


def coerce_correction(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Turn an admin correction payload into typed AttendanceSession field values."""

    updates: dict[str, Any] = {}
    for key, raw in changes.items():
        convert = _CORRECTABLE_FIELDS.get(key)
        if convert is None:
            raise ValidationError(f"{key} cannot be corrected", code="invalid_correction")
        try:
            updates[key] = convert(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"invalid value for {key}: {raw!r}", code="invalid_correction")
    return updates


class AttendanceService:
    """Check-in / check-out state machine: NoSession -> CheckedIn -> CheckedOut, one session per user per day.

    Every mutation for a user runs under that user's lock, so the duplicate
    check and the insert cannot interleave with a concurrent request.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        policies: DepartmentPolicyRepository,
        locations: LocationService,
        *,
        cache: AttendanceCache | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Clock | None = None,
        locks: UserLockRegistry | None = None,
        offsite_checkout_distance_meters: float = DEFAULT_OFFSITE_CHECKOUT_DISTANCE_METERS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policies = policies
        self._locations = locations
        self._cache = cache
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock or SystemClock()
        self._locks = locks or UserLockRegistry()
        self._offsite_distance = float(offsite_checkout_distance_meters)

    # ----- lookups -----

    def _profile(self, user_id: int) -> Optional[Employee]:
        def load() -> Optional[Employee]:
            return self._employees.get_by_id(user_id)

        return self._cache.user_profile(user_id, load) if self._cache else load()

    def _require_employee(self, user_id: int) -> Employee:
        employee = self._profile(user_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found", code="employee_not_found")
        return employee

    def policy_for(self, employee: Employee) -> DepartmentPolicy:
        if employee.dept_id is None:
            raise ConfigurationError(
                f"Employee {employee.user_id} is not assigned to a department", code="department_missing"
            )

        def load() -> Optional[DepartmentPolicy]:
            return self._policies.get_for_department(employee.dept_id)

        policy = self._cache.department_timing(employee.dept_id, load) if self._cache else load()
        if policy is None:
            raise ConfigurationError(
                f"No working hours configured for department {employee.dept_name or employee.dept_id}",
                code="department_policy_missing",
            )
        return policy

    def get_today_record(self, user_id: int) -> Optional[AttendanceSession]:
        today = self._clock.now().date()

        def load() -> Optional[AttendanceSession]:
            return self._attendance.get_for_user_and_date(user_id, today)

        return self._cache.user_today(user_id, load) if self._cache else load()

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        def load() -> list[AttendanceSession]:
            return list(self._attendance.get_recent_for_user(user_id, limit))

        filters = {"user_id": user_id, "limit": limit}
        return self._cache.attendance_list(filters, load) if self._cache else load()

    def list_live(self) -> list[AttendanceSession]:
        """Sessions still open today (the live roster)."""
        today = self._clock.now().date()

        def load() -> list[AttendanceSession]:
            return [s for s in self._attendance.list_open_sessions() if s.work_date == today]

        return self._cache.live_roster(load) if self._cache else load()

    def department_stats(self, dept_id: int, work_date: Optional[date] = None) -> DepartmentDayStats:
        """Head counts for a department. Only today's figures are cached."""
        today = self._clock.now().date()
        day = work_date or today

        def load() -> DepartmentDayStats:
            sessions = []
            for s in self._attendance.list_for_date(day):
                employee = self._profile(s.user_id)
                if employee and employee.dept_id == dept_id:
                    sessions.append(s)
            return DepartmentDayStats.from_sessions(dept_id, day, sessions)

        if self._cache and day == today:
            return self._cache.department_stats(dept_id, load)
        return load()

    # ----- check-in -----

    def _validate_office(self, user_id: int, sample: LocationSample) -> ValidationResult:
        result = self._locations.validate(sample)
        if result.validation_path == ValidationPath.NO_OFFICES:
            raise ConfigurationError(result.recommendations[0], code="no_offices")
        if not result.is_valid:
            logger.warning(
                "check-in rejected user=%s office=%s distance=%.1fm accuracy=%.1fm",
                user_id,
                result.office_id,
                result.distance_meters or 0.0,
                sample.accuracy_meters,
            )
            raise LocationRejectedError(
                "You are not within an office location",
                recommendations=result.recommendations,
            )
        return result

    def _check_attendance_type(
        self,
        request: CheckInRequest,
        policy: DepartmentPolicy,
        *,
        reason: Optional[str],
        photo_url: Optional[str],
    ) -> Optional[ValidationResult]:
        if request.attendance_type == AttendanceType.REMOTE:
            if not policy.allow_remote_work:
                raise PolicyViolationError("Remote work is not allowed for your department", code="remote_not_allowed")
            if not reason:
                raise PolicyViolationError("A reason is required for remote work", code="reason_required")
            return None

        if request.attendance_type == AttendanceType.FIELD_WORK:
            if not policy.allow_field_work:
                raise PolicyViolationError("Field work is not allowed for your department", code="field_work_not_allowed")
            if not photo_url:
                raise PolicyViolationError("A photo is required for field work", code="photo_required")
            return None

        if request.sample is None:
            raise ValidationError("Location is required for office check-in", code="location_required")
        return self._validate_office(request.user_id, request.sample)

    def check_in(self, request: CheckInRequest) -> AttendanceResult:
        with self._locks.hold(request.user_id):
            now = self._clock.now()
            today = now.date()

            employee = self._require_employee(request.user_id)
            policy = self.policy_for(employee)

            if self._attendance.get_for_user_and_date(employee.user_id, today):
                raise PolicyViolationError("You have already checked in today", code="already_checked_in")

            if now < at_time(today, policy.earliest_check_in, now.tzinfo):
                raise PolicyViolationError(
                    f"Check-in opens at {policy.earliest_check_in:%H:%M}", code="outside_check_in_window"
                )

            reason = optional_text(request.reason)
            photo_url = optional_text(request.photo_url)
            validation = self._check_attendance_type(request, policy, reason=reason, photo_url=photo_url)

            sample = request.sample
            anomaly = self._locations.screen(employee.user_id, sample) if sample else AnomalyReport.clean()

            strategy = self._factory.for_checkin(now=now, today=today, policy=policy)
            decision = strategy.decide_checkin(now=now, today=today, policy=policy)

            draft = AttendanceSession(
                attendance_id=0,
                user_id=employee.user_id,
                work_date=today,
                check_in_time=now,
                status=decision.status,
                attendance_type=request.attendance_type,
                check_in_location=sample.coordinates if sample else None,
                office_id=validation.office_id if validation else None,
                distance_meters=validation.distance_meters if validation else None,
                validation_confidence=validation.confidence if validation else None,
                photo_url_in=photo_url,
                reason=reason,
                risk_level=anomaly.risk_level,
                anomaly_reasons=tuple(anomaly.reasons),
                note=decision.note,
            )
            session = replace(draft, attendance_id=self._attendance.create_checkin(draft))

        self._after_write(employee.user_id, employee.dept_id)
        logger.info(
            "check-in user=%s type=%s status=%s risk=%s",
            employee.user_id,
            session.attendance_type.value,
            session.status.value,
            session.risk_level.value,
        )
        return AttendanceResult(session=session, validation=validation, anomaly=anomaly)

    # ----- check-out -----

    def _far_from_check_in(self, session: AttendanceSession, sample: LocationSample) -> bool:
        if session.check_in_location is None:
            return False
        return distance_meters(session.check_in_location, sample.coordinates) > self._offsite_distance

    def check_out(self, request: CheckOutRequest) -> AttendanceResult:
        with self._locks.hold(request.user_id):
            now = self._clock.now()
            today = now.date()

            record = self._attendance.get_for_user_and_date(request.user_id, today)
            if not record:
                raise NotFoundError("You have not checked in today", code="not_checked_in")
            if not record.is_open:
                raise PolicyViolationError("You have already checked out today", code="already_checked_out")

            employee = self._require_employee(request.user_id)
            policy = self.policy_for(employee)
            reason = optional_text(request.reason)
            photo_url = optional_text(request.photo_url)

            expected_out = at_time(today, policy.expected_check_out, now.tzinfo)
            if now < expected_out and not reason and not policy.allow_early_check_out:
                raise PolicyViolationError(
                    f"Checking out before {policy.expected_check_out:%H:%M} requires a reason",
                    code="reason_required",
                )

            sample = request.sample
            validation: Optional[ValidationResult] = None
            offsite = False
            if sample is not None:
                validation = self._locations.validate(sample)
                offsite = not validation.is_valid or self._far_from_check_in(record, sample)
            elif record.attendance_type == AttendanceType.OFFICE:
                raise ValidationError("Location is required for office check-out", code="location_required")

            if not photo_url:
                if record.attendance_type == AttendanceType.FIELD_WORK:
                    raise PolicyViolationError("A photo is required to end field work", code="photo_required")
                if record.attendance_type == AttendanceType.OFFICE and offsite:
                    raise PolicyViolationError(
                        "A photo is required when checking out away from the office", code="photo_required"
                    )

            anomaly = self._locations.screen(employee.user_id, sample) if sample else AnomalyReport.clean()

            strategy = self._factory.for_checkout(now=now, today=today, policy=policy)
            decision = strategy.decide_checkout(now=now, today=today, policy=policy, session=record)

            closed = replace(
                record,
                check_out_time=now,
                check_out_location=sample.coordinates if sample else None,
                status=decision.status,
                overtime_minutes=decision.overtime_minutes,
                photo_url_out=photo_url,
                checkout_reason=reason,
                checkout_type=CheckoutType.MANUAL,
                risk_level=record.risk_level.escalate(anomaly.risk_level),
                anomaly_reasons=record.anomaly_reasons + tuple(anomaly.reasons),
                note=decision.note or record.note,
            )
            if not self._attendance.update_checkout(closed):
                raise PolicyViolationError("You have already checked out today", code="already_checked_out")

        self._after_write(employee.user_id, employee.dept_id)
        logger.info(
            "check-out user=%s status=%s worked=%smin overtime=%smin offsite=%s",
            employee.user_id,
            closed.status.value,
            closed.worked_minutes,
            closed.overtime_minutes,
            offsite,
        )
        return AttendanceResult(session=closed, validation=validation, anomaly=anomaly)

    # ----- overtime -----

    def enable_overtime(self, user_id: int) -> AttendanceSession:
        """Keep today's session open past the usual auto-checkout, up to the day-end cutoff."""

        with self._locks.hold(user_id):
            now = self._clock.now()
            today = now.date()

            record = self._attendance.get_for_user_and_date(user_id, today)
            if not record:
                raise NotFoundError("You have not checked in today", code="not_checked_in")
            if not record.is_open:
                raise PolicyViolationError("You have already checked out today", code="already_checked_out")
            if record.overtime_enabled:
                return record

            employee = self._require_employee(user_id)
            policy = self.policy_for(employee)
            if now < at_time(today, policy.expected_check_out, now.tzinfo):
                raise PolicyViolationError(
                    f"Overtime can be requested after {policy.expected_check_out:%H:%M}",
                    code="overtime_not_available",
                )

            self._attendance.set_overtime_enabled(record.attendance_id, True)
            session = replace(record, overtime_enabled=True)

        self._after_write(employee.user_id, employee.dept_id)
        logger.info("overtime enabled user=%s attendance=%s", user_id, record.attendance_id)
        return session

    # ----- admin -----

    def admin_correct(self, *, actor_id: int, attendance_id: int, changes: Mapping[str, Any]) -> AttendanceSession:
        """Admin override of stored fields. Bypasses the check-in/out rules on purpose."""

        actor = self._employees.get_by_id(actor_id)
        if not actor or not actor.is_admin:
            raise AuthorizationError("Only administrators can correct attendance records")

        updates = coerce_correction(changes)
        if not updates:
            raise ValidationError("No changes supplied", code="invalid_correction")

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} not found")

        now = self._clock.now()
        for key in ("check_in_time", "check_out_time"):
            if updates.get(key) is not None:
                updates[key] = align_tz(updates[key], now)

        with self._locks.hold(record.user_id):
            corrected = replace(record, **updates)
            if corrected.check_out_time is not None and corrected.check_out_time < corrected.check_in_time:
                raise ValidationError("check_out_time must not be before check_in_time", code="invalid_correction")
            self._attendance.admin_update_record(corrected)

        owner = self._profile(record.user_id)
        self._after_write(record.user_id, owner.dept_id if owner else None)
        logger.info(
            "attendance corrected id=%s user=%s by admin=%s fields=%s",
            attendance_id,
            record.user_id,
            actor_id,
            ",".join(sorted(updates)),
        )
        return corrected

    def _after_write(self, user_id: int, dept_id: Optional[int]) -> None:
        if self._cache:
            self._cache.on_attendance_write(user_id=user_id, dept_id=dept_id)
