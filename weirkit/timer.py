"""A background timer that runs a housekeeping callback at an interval."""

from __future__ import annotations

import enum
import queue
import threading
from collections.abc import Callable


class _Action(enum.Enum):
    STOP = enum.auto()
    RESET = enum.auto()
    TRIGGER = enum.auto()


class Timer:
    """Calls a function periodically on a background thread.

    An interval of zero (or less) makes the timer wait indefinitely; it then
    reacts only to :meth:`trigger` and :meth:`stop`. Changing the interval
    restarts the current wait.
    """

    def __init__(self, interval: float = 0.0) -> None:
        self._interval = float(interval)
        self._lock = threading.Lock()
        self._running = False
        self._messages: queue.Queue[_Action] = queue.Queue()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """The wait between calls, in seconds."""
        with self._lock:
            return self._interval

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def start(self, keephouse: Callable[[], object]) -> None:
        """Start calling ``keephouse``; does nothing if already running."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._messages = queue.Queue()
            self._thread = threading.Thread(
                target=self._run,
                args=(keephouse, self._messages),
                name="weirkit-timer",
                daemon=True,
            )
            self._thread.start()

    def _run(self, keephouse: Callable[[], object], messages: queue.Queue[_Action]) -> None:
        while True:
            interval = self.interval
            try:
                action = messages.get(timeout=interval) if interval > 0 else messages.get()
            except queue.Empty:
                action = None
            if action is _Action.STOP:
                return
            if action is _Action.RESET:
                continue
            keephouse()

    def set_interval(self, interval: float) -> None:
        """Change the interval and restart the current wait."""
        with self._lock:
            self._interval = float(interval)
            if self._running:
                self._messages.put(_Action.RESET)

    def trigger(self) -> None:
        """Run the callback now, then restart the wait."""
        with self._lock:
            if self._running:
                self._messages.put(_Action.TRIGGER)

    def trigger_after(self, delay: float) -> None:
        """Call :meth:`trigger` once ``delay`` seconds have passed."""
        delayed = threading.Timer(delay, self.trigger)
        delayed.daemon = True
        delayed.start()

    def stop(self) -> None:
        """Stop the timer; no further callbacks run once this returns."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._messages.put(_Action.STOP)
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join()