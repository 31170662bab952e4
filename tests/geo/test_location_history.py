from datetime import datetime, timedelta

from src.geo_attendance.geo_attendance.common.clock import FixedClock
from src.geo_attendance.geo_attendance.geo.history import LocationHistory
from src.geo_attendance.geo_attendance.geo.model import LocationSample

T0 = datetime(2026, 3, 2, 8, 0, 0)


def _s(minutes: float) -> LocationSample:
    return LocationSample(latitude=0.0, longitude=0.0, accuracy_meters=10, timestamp=T0 + timedelta(minutes=minutes))


def test_keeps_only_the_newest_samples():
    clock = FixedClock(T0 + timedelta(minutes=10))
    history = LocationHistory(clock=clock, max_samples=3)

    for m in range(5):
        history.append(1, _s(m))

    assert [s.timestamp.minute for s in history.recent(1)] == [2, 3, 4]


def test_old_samples_expire():
    clock = FixedClock(T0)
    history = LocationHistory(clock=clock, max_age=timedelta(minutes=60))
    history.append(1, _s(0))

    clock.advance(minutes=61)

    assert history.recent(1) == []
    assert len(history) == 0


def test_users_are_isolated():
    history = LocationHistory(clock=FixedClock(T0))
    history.append(1, _s(0))

    assert history.recent(2) == []
    assert len(history.recent(1)) == 1
