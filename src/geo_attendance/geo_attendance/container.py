from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from .attendance.auto_checkout import AutoCheckoutService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.locks import UserLockRegistry
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .cache.service import AttendanceCache, ResultCache
from .common.clock import Clock, SystemClock
from .core.constants import (
    DEFAULT_DAY_END_CUTOFF,
    DEFAULT_LOCATION_HISTORY_MAX_AGE_MINUTES,
    DEFAULT_LOCATION_HISTORY_SIZE,
    DEFAULT_OFFSITE_CHECKOUT_DISTANCE_METERS,
)
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentPolicyRepository
from .departments.repository import DepartmentPolicyRepository
from .departments.settings_repository import SettingsDepartmentPolicyRepository
from .geo.history import LocationHistory
from .geo.service import LocationService
from .geo.validation import LocationValidator
from .offices.mysql_office_repository import MySQLOfficeRepository
from .offices.repository import OfficeRepository
from .users.mysql_user_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository


@dataclass(frozen=True)
class Container:
    clock: Clock

    offices_repo: OfficeRepository
    policies_repo: DepartmentPolicyRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    cache: AttendanceCache
    location_service: LocationService
    attendance_service: AttendanceService
    auto_checkout_service: AutoCheckoutService


def wire_services(
    *,
    offices_repo: OfficeRepository,
    policies_repo: DepartmentPolicyRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    geofence: Optional[Mapping[str, Any]] = None,
    clock: Optional[Clock] = None,
) -> Container:
    """Build the service graph on top of any repository implementations."""

    geofence = geofence or {}
    clock = clock or SystemClock()

    cache = AttendanceCache(ResultCache(clock=clock), clock=clock)
    locks = UserLockRegistry()
    history = LocationHistory(
        clock=clock,
        max_samples=int(geofence.get("LOCATION_HISTORY_SIZE", DEFAULT_LOCATION_HISTORY_SIZE)),
        max_age=timedelta(
            minutes=int(geofence.get("LOCATION_HISTORY_MAX_AGE_MINUTES", DEFAULT_LOCATION_HISTORY_MAX_AGE_MINUTES))
        ),
    )
    validator = LocationValidator(
        clock=clock,
        indoor_leniency_enabled=bool(geofence.get("INDOOR_LENIENCY_ENABLED", True)),
    )
    location_service = LocationService(offices_repo, validator, history)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        policies_repo,
        location_service,
        cache=cache,
        strategy_factory=AttendanceStrategyFactory(),
        clock=clock,
        locks=locks,
        offsite_checkout_distance_meters=float(
            geofence.get("OFFSITE_CHECKOUT_DISTANCE_METERS", DEFAULT_OFFSITE_CHECKOUT_DISTANCE_METERS)
        ),
    )
    auto_checkout_service = AutoCheckoutService(
        attendance_repo,
        employees_repo,
        policies_repo,
        cache=cache,
        clock=clock,
        locks=locks,
        day_end_cutoff=str(geofence.get("DAY_END_CUTOFF", DEFAULT_DAY_END_CUTOFF)),
    )

    return Container(
        clock=clock,
        offices_repo=offices_repo,
        policies_repo=policies_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        cache=cache,
        location_service=location_service,
        attendance_service=attendance_service,
        auto_checkout_service=auto_checkout_service,
    )


def build_container(
    *,
    db_config: dict,
    geofence: Optional[Mapping[str, Any]] = None,
    department_policies: Optional[Mapping[Any, Mapping[str, Any]]] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    if department_policies:
        policies_repo: DepartmentPolicyRepository = SettingsDepartmentPolicyRepository.from_settings(
            department_policies
        )
    else:
        policies_repo = MySQLDepartmentPolicyRepository(conn)

    return wire_services(
        offices_repo=MySQLOfficeRepository(conn),
        policies_repo=policies_repo,
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        geofence=geofence,
    )
