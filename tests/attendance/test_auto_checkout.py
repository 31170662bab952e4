from __future__ import annotations

from dataclasses import replace
from datetime import datetime, time

from src.geo_attendance.geo_attendance.attendance.auto_checkout import auto_close_cutoff
from src.geo_attendance.geo_attendance.attendance.model import AttendanceSession, CheckInRequest
from src.geo_attendance.geo_attendance.core.enums import AttendanceStatus, CheckoutType
from src.geo_attendance.geo_attendance.geo.model import LocationSample
from tests.fakes import STAFF_ID


def _check_in(container, clock) -> int:
    sample = LocationSample(latitude=0.0, longitude=0.0, accuracy_meters=5, timestamp=clock.now())
    return container.attendance_service.check_in(CheckInRequest(user_id=STAFF_ID, sample=sample)).session.attendance_id


def test_session_closed_two_hours_after_expected_check_out(container, clock, attendance_repo):
    attendance_id = _check_in(container, clock)

    clock.set(datetime(2026, 3, 2, 19, 59))
    assert container.auto_checkout_service.run_once().skipped == [attendance_id]

    clock.set(datetime(2026, 3, 2, 20, 30))
    summary = container.auto_checkout_service.run_once()

    assert summary.closed == [attendance_id]
    closed = attendance_repo.get_by_id(attendance_id)
    assert closed.check_out_time == datetime(2026, 3, 2, 20, 0)
    assert closed.checkout_type == CheckoutType.AUTO
    assert closed.overtime_minutes == 0
    assert "Automatically checked out" in closed.checkout_reason


def test_sweep_is_idempotent(container, clock, attendance_repo):
    attendance_id = _check_in(container, clock)
    clock.set(datetime(2026, 3, 2, 21, 0))

    first = container.auto_checkout_service.run_once()
    snapshot = attendance_repo.get_by_id(attendance_id)
    second = container.auto_checkout_service.run_once()

    assert first.closed == [attendance_id]
    assert second.to_dict() == {"closed": [], "skipped": [], "failed": []}
    assert attendance_repo.get_by_id(attendance_id) == snapshot


def test_overtime_defers_close_to_day_end(container, clock, attendance_repo):
    attendance_id = _check_in(container, clock)
    clock.set(datetime(2026, 3, 2, 18, 10))
    container.attendance_service.enable_overtime(STAFF_ID)

    clock.set(datetime(2026, 3, 2, 21, 0))
    assert container.auto_checkout_service.run_once().skipped == [attendance_id]

    clock.set(datetime(2026, 3, 2, 23, 56))
    assert container.auto_checkout_service.run_once().closed == [attendance_id]
    assert attendance_repo.get_by_id(attendance_id).check_out_time == datetime(2026, 3, 2, 23, 55)


def test_one_bad_record_does_not_stop_the_sweep(container, clock, attendance_repo):
    orphan_id = attendance_repo.create_checkin(
        AttendanceSession(
            attendance_id=0,
            user_id=777,
            work_date=clock.now().date(),
            check_in_time=clock.now(),
            status=AttendanceStatus.PRESENT,
        )
    )
    attendance_id = _check_in(container, clock)
    clock.set(datetime(2026, 3, 2, 22, 0))

    summary = container.auto_checkout_service.run_once()

    assert summary.failed == [orphan_id]
    assert summary.closed == [attendance_id]
    assert attendance_repo.get_by_id(orphan_id).is_open


def test_overtime_never_brings_the_close_forward(policy):
    night_shift = replace(policy, expected_check_in=time(15, 0), expected_check_out=time(23, 0))
    session = AttendanceSession(
        attendance_id=1,
        user_id=STAFF_ID,
        work_date=datetime(2026, 3, 2).date(),
        check_in_time=datetime(2026, 3, 2, 15, 0),
        status=AttendanceStatus.PRESENT,
    )

    normal = auto_close_cutoff(session, night_shift, day_end=time(23, 55))
    with_overtime = auto_close_cutoff(replace(session, overtime_enabled=True), night_shift, day_end=time(23, 55))

    assert normal == datetime(2026, 3, 3, 1, 0)
    assert with_overtime == normal
