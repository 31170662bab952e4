from datetime import time

import pytest

from src.geo_attendance.geo_attendance.core.exceptions import ConfigurationError
from src.geo_attendance.geo_attendance.departments.model import DepartmentPolicy
from src.geo_attendance.geo_attendance.departments.settings_repository import SettingsDepartmentPolicyRepository


def test_from_mapping_applies_defaults():
    policy = DepartmentPolicy.from_mapping(
        {"dept_name": "Sales", "expected_check_in": "08:30", "expected_check_out": "17:30"},
        dept_id=3,
    )

    assert policy.dept_id == 3
    assert policy.expected_check_in == time(8, 30)
    assert policy.late_grace_minutes == 15
    assert policy.overtime_threshold_minutes == 30
    assert policy.auto_checkout_after_minutes == 120
    assert policy.earliest_check_in == time(6, 0)
    assert not policy.allow_remote_work


def test_from_mapping_accepts_time_objects():
    policy = DepartmentPolicy.from_mapping(
        {"dept_id": 4, "expected_check_in": time(7, 0), "expected_check_out": time(15, 0), "allow_field_work": 1}
    )

    assert policy.expected_check_out == time(15, 0)
    assert policy.allow_field_work


@pytest.mark.parametrize(
    "data",
    [
        {"expected_check_out": "17:00"},
        {"expected_check_in": "9am", "expected_check_out": "17:00"},
        {"expected_check_in": "09:00", "expected_check_out": "08:00"},
        {"expected_check_in": "09:00", "expected_check_out": "17:00", "late_grace_minutes": -5},
        {"expected_check_in": "05:00", "expected_check_out": "17:00", "earliest_check_in": "06:00"},
    ],
)
def test_from_mapping_rejects_bad_config(data):
    with pytest.raises(ConfigurationError):
        DepartmentPolicy.from_mapping(data, dept_id=1)


def test_settings_repository_falls_back_to_default():
    repo = SettingsDepartmentPolicyRepository.from_settings(
        {
            "default": {"expected_check_in": "09:00", "expected_check_out": "18:00"},
            7: {"dept_name": "Ops", "expected_check_in": "07:00", "expected_check_out": "16:00"},
        }
    )

    assert repo.get_for_department(7).expected_check_in == time(7, 0)
    assert repo.get_for_department(99).expected_check_in == time(9, 0)
    assert [d.dept_name for d in repo.list_departments()] == ["Ops"]


def test_settings_repository_without_default_returns_none():
    repo = SettingsDepartmentPolicyRepository({})

    assert repo.get_for_department(1) is None
