"""
Per-key locks.

Two things in the ledger must never be read-then-written by two
callers at once: a sequence counter, and the status of a fiscal
period while something is being posted into it. Both use the
same KeyedLock so the discipline is written once.

The locks are re-entrant per thread: closing a period from
inside a posting on the same thread does not deadlock, and the
posting engine's re-check still sees the new status.
"""

import threading
from contextlib import contextmanager


class KeyedLock:
    """A lazily created RLock per key."""

    def __init__(self, name: str):
        self.name = name
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def acquire(self, key: str):
        lock = self._lock_for(key)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Process-wide instances. Keys are normalized by the callers
# (sequence codes as-is, period codes upper-cased).
SEQUENCE_LOCKS = KeyedLock("sequences")
PERIOD_LOCKS = KeyedLock("fiscal_periods")
