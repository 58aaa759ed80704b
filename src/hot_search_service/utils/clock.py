"""Millisecond clock used to stamp recorded terms."""

import threading

from ..models.term_record import now_millis


class MonotonicMillisClock:
    """
    Wall-clock epoch milliseconds that never repeat or go backwards.

    Two records made by the same process always get distinct timestamps,
    so "more recently accessed" is a strict order even under bursts.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = now_millis()
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now
