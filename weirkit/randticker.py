"""A ticker whose period is jittered by a random variance."""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Iterator


class RandTicker:
    """Delivers ticks every ``interval`` +/- ``variance`` seconds.

    Ticks are monotonic timestamps. Only the most recent undelivered tick is
    kept; ticks arriving while one is pending are dropped.
    """

    def __init__(self, interval: float, variance: float) -> None:
        if variance < 0:
            raise ValueError("variance must not be negative")
        self._cond = threading.Condition()
        self._tick: float | None = None
        self._closed = False
        self._done = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(float(interval), float(variance)),
            name="weirkit-randticker",
            daemon=True,
        )
        self._thread.start()

    def _run(self, interval: float, variance: float) -> None:
        rnd = random.Random()
        while True:
            jitter = rnd.uniform(-variance, variance) if variance else 0.0
            if self._done.wait(max(0.0, interval + jitter)):
                with self._cond:
                    self._closed = True
                    self._cond.notify_all()
                return
            now = time.monotonic()
            with self._cond:
                if self._tick is None:
                    self._tick = now
                    self._cond.notify_all()

    def receive(self, timeout: float | None = None) -> float | None:
        """Wait for the next tick and return its timestamp.

        Returns ``None`` once the ticker is stopped and drained; raises
        :class:`TimeoutError` if nothing arrives within ``timeout`` seconds.
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: self._tick is not None or self._closed, timeout
            )
            if not ready:
                raise TimeoutError("no tick arrived in time")
            if self._tick is not None:
                tick, self._tick = self._tick, None
                return tick
            return None

    def __iter__(self) -> Iterator[float]:
        while (tick := self.receive()) is not None:
            yield tick

    def stop(self) -> None:
        """Stop ticking; pending ticks can still be received."""
        self._done.set()
        if self._thread is not threading.current_thread():
            self._thread.join()