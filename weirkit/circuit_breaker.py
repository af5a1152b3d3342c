"""A circuit breaker driven by failure rates over a sliding window."""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from weirkit.sliding_window import SlidingWindow, now_ms

TOTAL_HIT = "total"
FAILURE_HIT = "failure"

_Fallback = Optional[Callable[[BaseException], Any]]


class CircuitBreakerStatus(enum.IntEnum):
    CLOSED = 0
    OPEN = 1
    HALF_OPEN = 2
    FORCE_OPEN = 3


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """Settings of a circuit breaker.

    ``failure_rate_threshold`` is a percentage. When ``failure_num`` is
    non-zero the breaker opens on the failure count of the current cell
    instead of the failure rate over the window.
    """

    min_qps: int = 0
    failure_rate_threshold: int = 0
    open_status_duration_ms: int = 0
    force_open: bool = False
    failure_num: int = 0
    size: int = 10
    cell_interval_ms: int = 1000


class CircuitBreakError(Exception):
    """Passed to the fallback when the breaker refuses a call."""

    def __init__(self) -> None:
        super().__init__("circuit breaker triggered")


def _apply_fallback(fallback: _Fallback, err: BaseException) -> Any:
    """Hand ``err`` to the fallback, or raise it when there is none."""
    if fallback is None:
        raise err
    return fallback(err)


class CircuitBreaker:
    """Closed, open, half-open or forced-open guard around calls.

    Closed goes to open when failures cross the threshold; open goes to
    half-open once the open duration has passed; a single probe in half-open
    decides between closed and open again.
    """

    def __init__(self, config: CircuitBreakerConfig) -> None:
        self._lock = threading.Lock()
        self._sw = SlidingWindow(config.size, config.cell_interval_ms)
        self._config = config
        self._status = (
            CircuitBreakerStatus.FORCE_OPEN if config.force_open else CircuitBreakerStatus.CLOSED
        )
        self._open_start_ms = 0
        self._half_open_start_ms = 0
        self._half_open_probe_sent = False

    @property
    def config(self) -> CircuitBreakerConfig:
        with self._lock:
            return self._config

    @property
    def half_open_probe_sent(self) -> bool:
        with self._lock:
            return self._half_open_probe_sent

    @half_open_probe_sent.setter
    def half_open_probe_sent(self, value: bool) -> None:
        with self._lock:
            self._half_open_probe_sent = value

    def change_config(self, config: CircuitBreakerConfig) -> None:
        """Apply new settings, adjusting the state where they require it."""
        with self._lock:
            old = self._config
            self._config = config
            if config.force_open:
                self._status = CircuitBreakerStatus.FORCE_OPEN
                self._open_start_ms = 0
                self._half_open_start_ms = 0
                self._half_open_probe_sent = False
                for cell in self._sw.cells:
                    cell.reset()
                return
            if self._status is CircuitBreakerStatus.FORCE_OPEN:
                self._status = CircuitBreakerStatus.CLOSED
            if self._status is CircuitBreakerStatus.OPEN and config.min_qps > old.min_qps:
                self._status = CircuitBreakerStatus.CLOSED

    def status(self) -> CircuitBreakerStatus:
        """The current state, moving from open to half-open when it is time."""
        with self._lock:
            return self._current_status()

    def _current_status(self) -> CircuitBreakerStatus:
        if self._config.force_open:
            return CircuitBreakerStatus.FORCE_OPEN
        if (
            self._status is CircuitBreakerStatus.OPEN
            and now_ms() - self._open_start_ms > self._config.open_status_duration_ms
        ):
            self._status = CircuitBreakerStatus.HALF_OPEN
            self._half_open_start_ms = self._open_start_ms + self._config.open_status_duration_ms
            self._half_open_probe_sent = False
            self._open_start_ms = 0
        return self._status

    def do(
        self,
        run: Callable[[], Any],
        fallback: _Fallback = None,
    ) -> Any:
        """Call ``run`` if the breaker allows it and return its result.

        When ``run`` raises, or the breaker refuses the call, the result of
        ``fallback`` called with the exception is returned instead. Without a
        fallback that exception is raised.
        """
        status = self.status()
        if status is CircuitBreakerStatus.CLOSED:
            return self._call(run, fallback, is_probe=False)
        if status is CircuitBreakerStatus.HALF_OPEN:
            with self._lock:
                already_sent = self._half_open_probe_sent
                self._half_open_probe_sent = True
            if already_sent:
                return _apply_fallback(fallback, CircuitBreakError())
            return self._call(run, fallback, is_probe=True)
        return _apply_fallback(fallback, CircuitBreakError())

    def _call(
        self,
        run: Callable[[], Any],
        fallback: _Fallback,
        *,
        is_probe: bool,
    ) -> Any:
        try:
            result = run()
        except Exception as err:
            self.hit(now_ms(), is_probe, True)
            return _apply_fallback(fallback, err)
        self.hit(now_ms(), is_probe, False)
        return result

    def hit(self, now_ms: int, is_probe: bool, is_failure_hit: bool) -> None:
        """Record the outcome of a call and move between states accordingly."""
        status = self.status()
        with self._lock:
            if status is CircuitBreakerStatus.CLOSED:
                self._hit_closed(now_ms, is_failure_hit)
            elif status is CircuitBreakerStatus.HALF_OPEN and is_probe:
                if is_failure_hit:
                    self._open(now_ms)
                else:
                    self._status = CircuitBreakerStatus.CLOSED
                    self._half_open_start_ms = now_ms
                    self._half_open_probe_sent = False
                    self._open_start_ms = now_ms
            # In OPEN and FORCE_OPEN, or for a late non-probe call in
            # HALF_OPEN, the outcome no longer matters.

    def _hit_closed(self, now_ms: int, is_failure_hit: bool) -> None:
        sw = self._sw
        if is_failure_hit:
            sw.hit(now_ms, TOTAL_HIT, FAILURE_HIT)
        else:
            sw.hit(now_ms, TOTAL_HIT)
            return

        config = self._config
        if config.failure_num != 0:
            stats = sw.get_now_hits(now_ms, TOTAL_HIT, FAILURE_HIT)
            should_open = (
                stats[FAILURE_HIT] > config.failure_num and stats[TOTAL_HIT] > config.min_qps
            )
        else:
            stats = sw.get_hits(now_ms, TOTAL_HIT, FAILURE_HIT)
            total = stats[TOTAL_HIT]
            if total == 0:
                return
            failure_rate = int(stats[FAILURE_HIT] * 100 / total)
            qps = total * 1000 // (sw.size * sw.cell_interval_ms)
            should_open = failure_rate > config.failure_rate_threshold and qps > config.min_qps

        if should_open:
            self._open(now_ms)

    def _open(self, now_ms: int) -> None:
        self._status = CircuitBreakerStatus.OPEN
        self._open_start_ms = now_ms
        self._half_open_start_ms = 0
        self._half_open_probe_sent = False