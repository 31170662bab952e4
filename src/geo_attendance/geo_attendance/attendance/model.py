from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..core.enums import AttendanceStatus, AttendanceType, CheckoutType, RiskLevel
from ..geo.model import AnomalyReport, Coordinates, LocationSample, ValidationResult


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one attendance record per (user, work date).

    State is derived from the timestamps: open while check_out_time is None.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    attendance_type: AttendanceType = AttendanceType.OFFICE
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[Coordinates] = None
    check_out_location: Optional[Coordinates] = None
    office_id: Optional[int] = None
    distance_meters: Optional[float] = None
    validation_confidence: Optional[float] = None
    photo_url_in: Optional[str] = None
    photo_url_out: Optional[str] = None
    reason: Optional[str] = None
    checkout_reason: Optional[str] = None
    overtime_minutes: int = 0
    overtime_enabled: bool = False
    checkout_type: Optional[CheckoutType] = None
    risk_level: RiskLevel = RiskLevel.LOW
    anomaly_reasons: tuple[str, ...] = ()
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def worked_minutes(self) -> Optional[int]:
        if self.check_out_time is None:
            return None
        return max(0, minutes_between(self.check_in_time, self.check_out_time))

    def to_dict(self) -> dict:
        def _loc(c: Optional[Coordinates]):
            return {"latitude": c.latitude, "longitude": c.longitude} if c else None

        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat(),
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "attendance_type": self.attendance_type.value,
            "check_in_location": _loc(self.check_in_location),
            "check_out_location": _loc(self.check_out_location),
            "office_id": self.office_id,
            "distance": round(self.distance_meters, 1) if self.distance_meters is not None else None,
            "validation_confidence": self.validation_confidence,
            "photo_url_in": self.photo_url_in,
            "photo_url_out": self.photo_url_out,
            "reason": self.reason,
            "checkout_reason": self.checkout_reason,
            "overtime_minutes": self.overtime_minutes,
            "overtime_enabled": self.overtime_enabled,
            "checkout_type": self.checkout_type.value if self.checkout_type else None,
            "worked_minutes": self.worked_minutes,
            "risk_level": self.risk_level.value,
            "anomaly_reasons": list(self.anomaly_reasons),
            "note": self.note,
        }


@dataclass(frozen=True)
class CheckInRequest:
    user_id: int
    sample: Optional[LocationSample] = None
    attendance_type: AttendanceType = AttendanceType.OFFICE
    reason: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class CheckOutRequest:
    user_id: int
    sample: Optional[LocationSample] = None
    reason: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class AttendanceResult:
    """What a check-in/out hands back to the caller."""

    session: AttendanceSession
    validation: Optional[ValidationResult] = None
    anomaly: AnomalyReport = field(default_factory=AnomalyReport.clean)

    def to_dict(self) -> dict:
        return {
            "attendance": self.session.to_dict(),
            "validation": self.validation.to_dict() if self.validation else None,
            "anomaly": self.anomaly.to_dict(),
        }


@dataclass(frozen=True)
class AutoCheckoutSummary:
    closed: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"closed": list(self.closed), "skipped": list(self.skipped), "failed": list(self.failed)}


@dataclass(frozen=True)
class DepartmentDayStats:
    """Head counts for one department on one work date."""

    dept_id: int
    work_date: date
    checked_in: int = 0
    still_open: int = 0
    late: int = 0
    half_day: int = 0
    remote: int = 0
    field_work: int = 0
    flagged: int = 0
    overtime_minutes: int = 0

    @classmethod
    def from_sessions(cls, dept_id: int, work_date: date, sessions: list[AttendanceSession]) -> "DepartmentDayStats":
        return cls(
            dept_id=dept_id,
            work_date=work_date,
            checked_in=len(sessions),
            still_open=sum(1 for s in sessions if s.is_open),
            late=sum(1 for s in sessions if s.status == AttendanceStatus.LATE),
            half_day=sum(1 for s in sessions if s.status == AttendanceStatus.HALF_DAY),
            remote=sum(1 for s in sessions if s.attendance_type == AttendanceType.REMOTE),
            field_work=sum(1 for s in sessions if s.attendance_type == AttendanceType.FIELD_WORK),
            flagged=sum(1 for s in sessions if s.risk_level != RiskLevel.LOW),
            overtime_minutes=sum(s.overtime_minutes for s in sessions),
        )

    def to_dict(self) -> dict:
        return {
            "dept_id": self.dept_id,
            "work_date": self.work_date.isoformat(),
            "checked_in": self.checked_in,
            "still_open": self.still_open,
            "late": self.late,
            "half_day": self.half_day,
            "remote": self.remote,
            "field_work": self.field_work,
            "flagged": self.flagged,
            "overtime_minutes": self.overtime_minutes,
        }
