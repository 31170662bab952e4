from __future__ import annotations

import threading
from collections import deque
from datetime import timedelta
from typing import Deque, Hashable, Optional

from ..common.clock import Clock, SystemClock
from ..core.constants import DEFAULT_LOCATION_HISTORY_MAX_AGE_MINUTES, DEFAULT_LOCATION_HISTORY_SIZE
from .model import LocationSample


class LocationHistory:
    """Per-user rolling window of recent samples, used only for anomaly screening.

    Bounded by count and by age; nothing here is persisted.
    """

    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        max_samples: int = DEFAULT_LOCATION_HISTORY_SIZE,
        max_age: timedelta = timedelta(minutes=DEFAULT_LOCATION_HISTORY_MAX_AGE_MINUTES),
    ):
        if max_samples < 1:
            raise ValueError("max_samples must be at least 1")
        self._clock = clock or SystemClock()
        self._max_samples = int(max_samples)
        self._max_age = max_age
        self._by_user: dict[Hashable, Deque[LocationSample]] = {}
        self._lock = threading.Lock()

    def _evict(self, user_id: Hashable) -> Deque[LocationSample]:
        samples = self._by_user.get(user_id)
        if samples is None:
            return deque(maxlen=self._max_samples)
        cutoff = self._clock.now() - self._max_age
        while samples and samples[0].timestamp < cutoff:
            samples.popleft()
        if not samples:
            del self._by_user[user_id]
        return samples

    def recent(self, user_id: Hashable) -> list[LocationSample]:
        """Samples oldest -> newest."""
        with self._lock:
            return list(self._evict(user_id))

    def append(self, user_id: Hashable, sample: LocationSample) -> None:
        with self._lock:
            samples = self._evict(user_id)
            samples.append(sample)
            self._by_user[user_id] = samples

    def clear(self, user_id: Hashable | None = None) -> None:
        with self._lock:
            if user_id is None:
                self._by_user.clear()
            else:
                self._by_user.pop(user_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_user)
