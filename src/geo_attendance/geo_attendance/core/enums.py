from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Principal roles used for authorization checks."""

    ADMIN = "admin"
    STAFF = "staff"


class LocationSource(str, Enum):
    GPS = "gps"
    NETWORK = "network"
    PASSIVE = "passive"


class LocationQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ValidationPath(str, Enum):
    """Which rule accepted (or rejected) a location sample."""

    EXACT = "exact"
    ACCURACY_COMPENSATED = "accuracy_compensated"
    INDOOR_LENIENCY = "indoor_leniency"
    FAILED = "failed"
    NO_OFFICES = "no_offices"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_ORDER[self]

    def escalate(self, other: "RiskLevel") -> "RiskLevel":
        """Return the higher of the two levels; risk never decreases."""
        return other if other.rank > self.rank else self


_RISK_ORDER = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"
    HOLIDAY = "holiday"
    HALF_DAY = "half_day"


class AttendanceType(str, Enum):
    OFFICE = "office"
    REMOTE = "remote"
    FIELD_WORK = "field_work"


class CheckoutType(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"
