"""A hashed timing wheel for delayed callbacks keyed by identity."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass


def _to_ms(seconds: float) -> int:
    return round(seconds * 1_000_000_000) // 1_000_000


@dataclass
class _Task:
    callback: Callable[[], object]
    rounds: int


class TimeWheel:
    """Schedules callbacks in buckets advanced once per tick.

    Adding a key that is already scheduled replaces the earlier task.
    Callbacks run on their own threads.
    """

    def __init__(self, tick: float, buckets_num: int) -> None:
        if buckets_num <= 0:
            raise ValueError("bucket number must be greater than 0")
        tick_ms = _to_ms(tick)
        if tick_ms < 1:
            raise ValueError("tick must be at least one millisecond")
        self._tick = float(tick)
        self._tick_ms = tick_ms
        self._buckets_num = buckets_num
        self._buckets: list[dict[Hashable, _Task]] = [{} for _ in range(buckets_num)]
        self._bucket_indexes: dict[Hashable, int] = {}
        self._current = 0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start advancing the wheel on a background thread."""
        if self._thread is not None:
            raise RuntimeError("time wheel already started")
        self._thread = threading.Thread(
            target=self._run, name="weirkit-timewheel", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        next_tick = time.monotonic() + self._tick
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            self._handle_tick()
            next_tick += self._tick

    def stop(self) -> None:
        """Stop the wheel; scheduled tasks no longer fire."""
        if self._thread is None:
            raise RuntimeError("time wheel not started")
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join()

    def _handle_tick(self) -> None:
        due: list[Callable[[], object]] = []
        with self._lock:
            bucket = self._buckets[self._current]
            for key in list(bucket):
                task = bucket[key]
                if task.rounds > 0:
                    task.rounds -= 1
                    continue
                due.append(task.callback)
                del bucket[key]
                del self._bucket_indexes[key]
            self._current = (self._current + 1) % self._buckets_num
        for callback in due:
            threading.Thread(target=callback, daemon=True).start()

    def add(self, delay: float, key: Hashable, callback: Callable[[], object]) -> None:
        """Schedule ``callback`` under ``key`` to run after ``delay`` seconds."""
        if delay <= 0 or key is None:
            raise ValueError("invalid params")
        ticks = _to_ms(delay) // self._tick_ms
        with self._lock:
            rounds = ticks // self._buckets_num
            index = (self._current + ticks) % self._buckets_num
            previous = self._bucket_indexes.get(key)
            if previous is not None:
                self._buckets[previous].pop(key, None)
            self._bucket_indexes[key] = index
            self._buckets[index][key] = _Task(callback, rounds)

    def remove(self, key: Hashable) -> None:
        """Cancel the task scheduled under ``key`` without running it."""
        if key is None:
            raise ValueError("invalid params")
        with self._lock:
            index = self._bucket_indexes.pop(key, None)
            if index is not None:
                self._buckets[index].pop(key, None)