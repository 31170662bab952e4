from __future__ import annotations

from datetime import datetime, time

import pytest

from src.geo_attendance.geo_attendance.common.clock import FixedClock
from src.geo_attendance.geo_attendance.container import wire_services
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.departments.model import DepartmentPolicy
from src.geo_attendance.geo_attendance.departments.settings_repository import SettingsDepartmentPolicyRepository
from src.geo_attendance.geo_attendance.geo.model import OfficeLocation
from src.geo_attendance.geo_attendance.users.model import Employee
from tests.fakes import ADMIN_ID, STAFF_ID, InMemoryAttendance, InMemoryEmployees, InMemoryOffices


@pytest.fixture
def fixed_now() -> datetime:
    # Monday, five minutes before the 09:00 start
    return datetime(2026, 3, 2, 8, 55, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def office() -> OfficeLocation:
    return OfficeLocation(office_id=1, name="HQ", latitude=0.0, longitude=0.0, radius_meters=100)


@pytest.fixture
def policy() -> DepartmentPolicy:
    return DepartmentPolicy(
        dept_id=10,
        dept_name="Engineering",
        expected_check_in=time(9, 0),
        expected_check_out=time(18, 0),
        late_grace_minutes=15,
        overtime_threshold_minutes=30,
        allow_remote_work=True,
        allow_field_work=True,
    )


@pytest.fixture
def offices_repo(office) -> InMemoryOffices:
    return InMemoryOffices([office])


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(user_id=STAFF_ID, full_name="Staff A", role=Role.STAFF, dept_id=10, dept_name="Engineering"),
            Employee(user_id=ADMIN_ID, full_name="Admin B", role=Role.ADMIN, dept_id=10, dept_name="Engineering"),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def container(clock, policy, offices_repo, employees_repo, attendance_repo):
    return wire_services(
        offices_repo=offices_repo,
        policies_repo=SettingsDepartmentPolicyRepository({policy.dept_id: policy}),
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        clock=clock,
    )
