from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import (
    DEFAULT_AUTO_CHECKOUT_AFTER_MINUTES,
    DEFAULT_EARLIEST_CHECK_IN,
    DEFAULT_HALF_DAY_MINUTES,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_OVERTIME_THRESHOLD_MINUTES,
)
from ..core.exceptions import ConfigurationError


def _as_time(value: Any, field_name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_hhmm(str(value))
    except (TypeError, ValueError):
        raise ConfigurationError(f"{field_name} must be HH:MM, got {value!r}")


def _as_minutes(value: Any, field_name: str) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{field_name} must be a whole number of minutes, got {value!r}")
    if minutes < 0:
        raise ConfigurationError(f"{field_name} must not be negative")
    return minutes


@dataclass(frozen=True)
class Department:
    dept_id: int
    dept_name: str


@dataclass(frozen=True)
class DepartmentPolicy:
    """Working-hours policy for one department.

    Built once from configuration or the database; services only read it.
    """

    dept_id: int
    dept_name: str
    expected_check_in: time
    expected_check_out: time
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    overtime_threshold_minutes: int = DEFAULT_OVERTIME_THRESHOLD_MINUTES
    auto_checkout_after_minutes: int = DEFAULT_AUTO_CHECKOUT_AFTER_MINUTES
    half_day_minutes: int = DEFAULT_HALF_DAY_MINUTES
    earliest_check_in: time = time(6, 0)
    allow_remote_work: bool = False
    allow_field_work: bool = False
    allow_early_check_out: bool = False

    def __post_init__(self):
        if self.expected_check_out <= self.expected_check_in:
            raise ConfigurationError(
                f"department {self.dept_name}: expected check-out must be after expected check-in"
            )
        if self.earliest_check_in > self.expected_check_in:
            raise ConfigurationError(
                f"department {self.dept_name}: earliest check-in must not be after expected check-in"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, dept_id: Optional[int] = None) -> "DepartmentPolicy":
        """Parse a settings/DB row. Raises ConfigurationError on missing or malformed fields."""

        raw_id = dept_id if dept_id is not None else data.get("dept_id")
        if raw_id is None:
            raise ConfigurationError("department policy is missing dept_id")
        for required in ("expected_check_in", "expected_check_out"):
            if data.get(required) in (None, ""):
                raise ConfigurationError(f"department policy {raw_id} is missing {required}")

        return cls(
            dept_id=int(raw_id),
            dept_name=str(data.get("dept_name") or f"dept-{raw_id}"),
            expected_check_in=_as_time(data["expected_check_in"], "expected_check_in"),
            expected_check_out=_as_time(data["expected_check_out"], "expected_check_out"),
            late_grace_minutes=_as_minutes(
                data.get("late_grace_minutes", DEFAULT_LATE_GRACE_MINUTES), "late_grace_minutes"
            ),
            overtime_threshold_minutes=_as_minutes(
                data.get("overtime_threshold_minutes", DEFAULT_OVERTIME_THRESHOLD_MINUTES),
                "overtime_threshold_minutes",
            ),
            auto_checkout_after_minutes=_as_minutes(
                data.get("auto_checkout_after_minutes", DEFAULT_AUTO_CHECKOUT_AFTER_MINUTES),
                "auto_checkout_after_minutes",
            ),
            half_day_minutes=_as_minutes(data.get("half_day_minutes", DEFAULT_HALF_DAY_MINUTES), "half_day_minutes"),
            earliest_check_in=_as_time(data.get("earliest_check_in") or DEFAULT_EARLIEST_CHECK_IN, "earliest_check_in"),
            allow_remote_work=bool(data.get("allow_remote_work", False)),
            allow_field_work=bool(data.get("allow_field_work", False)),
            allow_early_check_out=bool(data.get("allow_early_check_out", False)),
        )

    def to_dict(self) -> dict:
        return {
            "dept_id": self.dept_id,
            "dept_name": self.dept_name,
            "expected_check_in": self.expected_check_in.strftime("%H:%M"),
            "expected_check_out": self.expected_check_out.strftime("%H:%M"),
            "late_grace_minutes": self.late_grace_minutes,
            "overtime_threshold_minutes": self.overtime_threshold_minutes,
            "auto_checkout_after_minutes": self.auto_checkout_after_minutes,
            "half_day_minutes": self.half_day_minutes,
            "earliest_check_in": self.earliest_check_in.strftime("%H:%M"),
            "allow_remote_work": self.allow_remote_work,
            "allow_field_work": self.allow_field_work,
            "allow_early_check_out": self.allow_early_check_out,
        }
