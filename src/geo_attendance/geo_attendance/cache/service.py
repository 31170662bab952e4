from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, MutableMapping, Optional, TypeVar

from ..common.clock import Clock, SystemClock
from ..core.constants import (
    TTL_ATTENDANCE_LIST,
    TTL_DEPARTMENT_STATS,
    TTL_DEPARTMENT_TIMING,
    TTL_LIVE_ROSTER,
    TTL_USER_PROFILE,
    TTL_USER_TODAY,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: datetime


class ResultCache:
    """Get-or-compute cache with per-key TTL and explicit invalidation.

    Expiry is passive (checked on read). Concurrent misses on the same key may
    each run `compute`; compute functions are idempotent reads.
    """

    def __init__(self, *, clock: Optional[Clock] = None, storage: Optional[MutableMapping[str, CacheEntry]] = None):
        self._clock = clock or SystemClock()
        self._storage: MutableMapping[str, CacheEntry] = storage if storage is not None else {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                return None
            if self._clock.now() >= entry.expires_at:
                del self._storage[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        expires_at = self._clock.now() + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._storage[key] = CacheEntry(key=key, value=value, expires_at=expires_at)

    def get_or_compute(self, key: str, ttl_seconds: float, compute: Callable[[], T]) -> T:
        with self._lock:
            entry = self._storage.get(key)
            if entry is not None and self._clock.now() < entry.expires_at:
                self._hits += 1
                return entry.value
            self._misses += 1

        # Compute outside the lock so a slow query does not block other keys.
        value = compute()
        self.set(key, value, ttl_seconds)
        return value

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._storage.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._storage if k.startswith(prefix)]
            for k in doomed:
                del self._storage[k]
        if doomed:
            logger.debug("cache invalidated prefix=%s keys=%d", prefix, len(doomed))
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._storage),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 3) if total else 0.0,
            }


class AttendanceCache:
    """Named keys and TTL tiers for attendance reads, plus write-side invalidation."""

    def __init__(self, cache: ResultCache, *, clock: Optional[Clock] = None):
        self._cache = cache
        self._clock = clock or SystemClock()

    def user_today(self, user_id: int, compute: Callable[[], T]) -> T:
        return self._cache.get_or_compute(f"attendance:today:{user_id}", TTL_USER_TODAY, compute)

    def department_stats(self, dept_id: int, compute: Callable[[], T]) -> T:
        return self._cache.get_or_compute(f"stats:department:{dept_id}", TTL_DEPARTMENT_STATS, compute)

    def attendance_list(self, filters: dict, compute: Callable[[], T]) -> T:
        filter_key = json.dumps(filters, sort_keys=True, default=str)
        return self._cache.get_or_compute(f"attendance:list:{filter_key}", TTL_ATTENDANCE_LIST, compute)

    def user_profile(self, user_id: int, compute: Callable[[], T]) -> T:
        return self._cache.get_or_compute(f"user:profile:{user_id}", TTL_USER_PROFILE, compute)

    def department_timing(self, dept_id: int, compute: Callable[[], T]) -> T:
        return self._cache.get_or_compute(f"timing:department:{dept_id}", TTL_DEPARTMENT_TIMING, compute)

    def live_roster(self, compute: Callable[[], T]) -> T:
        day = self._clock.now().date().isoformat()
        return self._cache.get_or_compute(f"attendance:live:{day}", TTL_LIVE_ROSTER, compute)

    def invalidate_user(self, user_id: int) -> None:
        self._cache.invalidate(f"attendance:today:{user_id}")
        self._cache.invalidate(f"user:profile:{user_id}")

    def invalidate_department(self, dept_id: int) -> None:
        self._cache.invalidate(f"stats:department:{dept_id}")
        self._cache.invalidate(f"timing:department:{dept_id}")

    def invalidate_attendance(self) -> None:
        self._cache.invalidate_prefix("attendance:list:")
        self._cache.invalidate_prefix("attendance:live:")
        self._cache.invalidate_prefix("stats:department:")

    def on_attendance_write(self, *, user_id: int, dept_id: Optional[int]) -> None:
        """Hook run after check-in, check-out, overtime and admin edits.

        Profile and department timing entries are left alone; attendance writes do not change them.
        """
        self._cache.invalidate(f"attendance:today:{user_id}")
        if dept_id is not None:
            self._cache.invalidate(f"stats:department:{dept_id}")
        self.invalidate_attendance()

    def stats(self) -> dict:
        return self._cache.stats()
