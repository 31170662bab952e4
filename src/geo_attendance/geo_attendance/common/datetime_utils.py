from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse 'HH:MM' (24h) into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def parse_iso_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def align_tz(value: datetime, reference: datetime) -> datetime:
    """Express `value` with the same tz-awareness as `reference`.

    Aware values are converted to local time and made naive for a naive clock.
    Naive values are taken to be in the reference zone.
    """
    if reference.tzinfo is None:
        if value.tzinfo is None:
            return value
        return value.astimezone().replace(tzinfo=None)
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    return value.astimezone(reference.tzinfo)


def at_time(day: date, at: time, tz: Optional[tzinfo] = None) -> datetime:
    """Anchor a wall-clock time on a calendar day, matching the clock's tz-awareness."""
    return datetime.combine(day, at, tzinfo=tz)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end (negative when end is earlier)."""
    return int((end - start).total_seconds() // 60)
