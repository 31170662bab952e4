from datetime import date, datetime, time

from src.geo_attendance.geo_attendance.attendance.factory import AttendanceStrategyFactory
from src.geo_attendance.geo_attendance.attendance.model import AttendanceSession
from src.geo_attendance.geo_attendance.attendance.strategies.early_strategy import EarlyCheckoutStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.late_strategy import LateStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.overtime_strategy import OvertimeStrategy
from src.geo_attendance.geo_attendance.core.enums import AttendanceStatus
from src.geo_attendance.geo_attendance.departments.model import DepartmentPolicy

POLICY = DepartmentPolicy(
    dept_id=1,
    dept_name="Engineering",
    expected_check_in=time(8, 0),
    expected_check_out=time(17, 0),
    late_grace_minutes=5,
    overtime_threshold_minutes=30,
)
TODAY = date(2025, 1, 1)


def _session(check_in: datetime) -> AttendanceSession:
    return AttendanceSession(
        attendance_id=1, user_id=1, work_date=TODAY, check_in_time=check_in, status=AttendanceStatus.PRESENT
    )


def test_factory_checkin_on_time_within_grace():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 8, 4, 59), today=TODAY, policy=POLICY)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_grace():
    now = datetime(2025, 1, 1, 8, 6, 0)
    strategy = AttendanceStrategyFactory().for_checkin(now=now, today=TODAY, policy=POLICY)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_checkin(now=now, today=TODAY, policy=POLICY)
    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Late by 6 minutes"


def test_factory_checkout_before_end_is_early():
    strategy = AttendanceStrategyFactory().for_checkout(now=datetime(2025, 1, 1, 16, 0), today=TODAY, policy=POLICY)

    assert isinstance(strategy, EarlyCheckoutStrategy)


def test_factory_checkout_exactly_at_end_is_normal():
    now = datetime(2025, 1, 1, 17, 0)
    strategy = AttendanceStrategyFactory().for_checkout(now=now, today=TODAY, policy=POLICY)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_checkout(now=now, today=TODAY, policy=POLICY, session=_session(datetime(2025, 1, 1, 8))).overtime_minutes == 0


def test_factory_checkout_shortly_after_end_counts_overtime():
    now = datetime(2025, 1, 1, 17, 29)
    strategy = AttendanceStrategyFactory().for_checkout(now=now, today=TODAY, policy=POLICY)

    assert isinstance(strategy, OvertimeStrategy)
    assert strategy.decide_checkout(now=now, today=TODAY, policy=POLICY, session=_session(datetime(2025, 1, 1, 8))).overtime_minutes == 29


def test_factory_checkout_after_end_counts_all_overtime():
    now = datetime(2025, 1, 1, 18, 30)
    strategy = AttendanceStrategyFactory().for_checkout(now=now, today=TODAY, policy=POLICY)

    assert isinstance(strategy, OvertimeStrategy)
    decision = strategy.decide_checkout(now=now, today=TODAY, policy=POLICY, session=_session(datetime(2025, 1, 1, 8)))
    assert decision.overtime_minutes == 90


def test_early_checkout_after_short_day_is_half_day():
    now = datetime(2025, 1, 1, 11, 0)
    decision = EarlyCheckoutStrategy().decide_checkout(
        now=now, today=TODAY, policy=POLICY, session=_session(datetime(2025, 1, 1, 8, 0))
    )

    assert decision.status == AttendanceStatus.HALF_DAY
    assert decision.overtime_minutes == 0
