"""Rate limiters: a sliding-window counter and a queue-based leaky bucket."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from weirkit.sliding_window import SlidingWindow, now_ms

_HIT_METRIC = "hit"


class RateLimitedError(Exception):
    """Raised when a request is refused by a rate limiter."""

    def __init__(self) -> None:
        super().__init__("rate limited")


class SlidingWindowRateLimiter:
    """Thread-safe limiter counting requests over the last second.

    The window covers one second split into ten cells of 100 ms. ``clock``
    returns the current time in milliseconds.
    """

    def __init__(
        self,
        qps_threshold: int,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._sw = SlidingWindow(10, 100)
        self._lock = threading.Lock()
        self._qps_threshold = qps_threshold
        self._clock = clock

    @property
    def qps_threshold(self) -> int:
        with self._lock:
            return self._qps_threshold

    def limit(self) -> None:
        """Count a request, or raise :class:`RateLimitedError` if over the limit."""
        now = self._clock()
        with self._lock:
            hits = self._sw.get_hit(now, _HIT_METRIC)
            duration_ms = self._sw.get_actual_duration_ms(now)
            # hits / (duration_ms / 1000) >= threshold, without division
            if hits * 1000 >= self._qps_threshold * duration_ms:
                raise RateLimitedError()
            self._sw.hit(now, _HIT_METRIC)

    def change_qps_threshold(self, qps_threshold: int) -> None:
        with self._lock:
            self._qps_threshold = qps_threshold


@dataclass
class _Waiter:
    event: threading.Event = field(default_factory=threading.Event)
    granted: bool = False


class LeakyBucketRateLimiter:
    """Lets through at most one request per ``1 / qps_threshold`` seconds.

    Requests queue up and leave the bucket one per tick, which smooths out
    bursts. Very high thresholds are limited by timer precision.
    """

    def __init__(self, qps_threshold: int) -> None:
        self._tick = self._tick_for(qps_threshold)
        self._cond = threading.Condition()
        self._waiters: deque[_Waiter] = deque()
        self._changed = False
        self._closed = False
        self._thread = threading.Thread(
            target=self._leak, name="weirkit-leaky-bucket", daemon=True
        )
        self._thread.start()

    @staticmethod
    def _tick_for(qps_threshold: int) -> float:
        if qps_threshold <= 0:
            raise ValueError("qps threshold must be positive")
        return 1.0 / qps_threshold

    def __enter__(self) -> LeakyBucketRateLimiter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _leak(self) -> None:
        with self._cond:
            next_tick = time.monotonic() + self._tick
            while True:
                now = time.monotonic()
                while not self._closed and not self._changed and now < next_tick:
                    self._cond.wait(next_tick - now)
                    now = time.monotonic()
                if self._closed:
                    return
                if self._changed:
                    self._changed = False
                    next_tick = now + self._tick
                    continue
                if self._waiters:
                    waiter = self._waiters.popleft()
                    waiter.granted = True
                    waiter.event.set()
                next_tick += self._tick
                if next_tick < now:
                    # Missed ticks are dropped rather than released in a burst.
                    next_tick = now + self._tick

    def limit(self) -> None:
        """Block until the bucket lets this request through."""
        waiter = _Waiter()
        with self._cond:
            if self._closed:
                raise RuntimeError("rate limiter is closed")
            self._waiters.append(waiter)
        waiter.event.wait()
        if not waiter.granted:
            raise RuntimeError("rate limiter is closed")

    def change_qps_threshold(self, qps_threshold: int) -> None:
        """Change the rate; the tick restarts with the new interval."""
        tick = self._tick_for(qps_threshold)
        with self._cond:
            self._tick = tick
            self._changed = True
            self._cond.notify_all()

    def close(self) -> None:
        """Stop the limiter; queued and later requests raise RuntimeError."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            pending = list(self._waiters)
            self._waiters.clear()
            self._cond.notify_all()
        for waiter in pending:
            waiter.event.set()
        if self._thread is not threading.current_thread():
            self._thread.join()