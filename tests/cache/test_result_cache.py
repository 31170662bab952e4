from datetime import datetime

from src.geo_attendance.geo_attendance.cache.service import AttendanceCache, ResultCache
from src.geo_attendance.geo_attendance.common.clock import FixedClock


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.calls


def test_entry_served_until_ttl_then_recomputed():
    clock = FixedClock(datetime(2026, 3, 2, 9, 0, 0))
    cache = ResultCache(clock=clock)
    compute = Counter()

    assert cache.get_or_compute("k", 30, compute) == 1
    clock.advance(seconds=29)
    assert cache.get_or_compute("k", 30, compute) == 1
    clock.advance(seconds=2)
    assert cache.get_or_compute("k", 30, compute) == 2
    assert compute.calls == 2


def test_entry_expires_exactly_at_ttl():
    clock = FixedClock(datetime(2026, 3, 2, 9, 0, 0))
    cache = ResultCache(clock=clock)
    cache.set("k", "v", 30)

    clock.advance(seconds=30)

    assert cache.get("k") is None


def test_invalidate_and_prefix():
    cache = ResultCache(clock=FixedClock(datetime(2026, 3, 2)))
    cache.set("attendance:list:a", 1, 60)
    cache.set("attendance:list:b", 2, 60)
    cache.set("user:profile:1", 3, 60)

    assert cache.invalidate_prefix("attendance:list:") == 2
    assert cache.invalidate("user:profile:1")
    assert not cache.invalidate("user:profile:1")
    assert cache.stats()["entries"] == 0


def test_stats_track_hits_and_misses():
    cache = ResultCache(clock=FixedClock(datetime(2026, 3, 2)))
    cache.get_or_compute("k", 30, lambda: 1)
    cache.get_or_compute("k", 30, lambda: 1)

    stats = cache.stats()
    assert (stats["hits"], stats["misses"], stats["hit_rate"]) == (1, 1, 0.5)


def test_attendance_write_drops_today_and_list_entries_but_keeps_timing():
    clock = FixedClock(datetime(2026, 3, 2, 9, 0, 0))
    facade = AttendanceCache(ResultCache(clock=clock), clock=clock)
    today, listing, timing = Counter(), Counter(), Counter()

    facade.user_today(1, today)
    facade.attendance_list({"dept": 10}, listing)
    facade.department_timing(10, timing)

    facade.on_attendance_write(user_id=1, dept_id=10)

    facade.user_today(1, today)
    facade.attendance_list({"dept": 10}, listing)
    facade.department_timing(10, timing)
    assert (today.calls, listing.calls, timing.calls) == (2, 2, 1)


def test_ttl_tiers_differ():
    clock = FixedClock(datetime(2026, 3, 2, 9, 0, 0))
    facade = AttendanceCache(ResultCache(clock=clock), clock=clock)
    live, profile = Counter(), Counter()
    facade.live_roster(live)
    facade.user_profile(1, profile)

    clock.advance(seconds=20)
    facade.live_roster(live)
    facade.user_profile(1, profile)

    assert live.calls == 2
    assert profile.calls == 1
