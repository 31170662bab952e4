from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock. Naive local time unless a tz is given."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Manually advanced clock, used by tests and replay tooling."""

    def __init__(self, current: datetime):
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, **delta) -> datetime:
        self._current = self._current + timedelta(**delta)
        return self._current
