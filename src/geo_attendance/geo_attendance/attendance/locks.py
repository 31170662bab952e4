from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class UserLockRegistry:
    """One re-entrant lock per user so check-in, check-out and overtime never interleave for that user.

    Locks are created lazily and kept for the life of the process.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    def _lock_for(self, user_id: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: Hashable) -> Iterator[None]:
        lock = self._lock_for(user_id)
        with lock:
            yield
