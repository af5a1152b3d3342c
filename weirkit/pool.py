"""A bounded pool of reusable resources such as connections."""

from __future__ import annotations

import json
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from weirkit.semaphore import Semaphore
from weirkit.timer import Timer

PREFILL_TIMEOUT = 30.0
"""Default limit, in seconds, on how long prefilling a new pool may take."""


class PoolClosedError(Exception):
    """Raised when a pool is used after it has been closed."""

    def __init__(self) -> None:
        super().__init__("resource pool is closed")


class PoolTimeoutError(Exception):
    """Raised when waiting for a resource takes longer than allowed."""

    def __init__(self) -> None:
        super().__init__("resource pool timed out")


class PoolContextExpiredError(Exception):
    """Raised when the time allowed for a request is used up before it starts."""

    def __init__(self) -> None:
        super().__init__("resource pool context already expired")


class Resource(Protocol):
    """Anything that the pool can hand out and later close."""

    def close(self) -> None: ...


Factory = Callable[[], Resource]


@dataclass(frozen=True)
class _Slot:
    resource: Resource | None = None
    time_used: float = 0.0


_EMPTY = _Slot()


class ResourcePool:
    """Hands out up to ``capacity`` resources made by ``factory``.

    ``idle_timeout`` is in seconds; resources unused for longer are closed and
    replaced. Zero disables the idle check. A non-zero
    ``prefill_parallelism`` fills the pool on creation, opening that many
    resources at a time. ``log_wait`` is called with the monotonic start time
    of every wait for a free resource.
    """

    def __init__(
        self,
        factory: Factory,
        capacity: int,
        max_cap: int,
        idle_timeout: float = 0.0,
        prefill_parallelism: int = 0,
        log_wait: Callable[[float], object] | None = None,
        *,
        prefill_timeout: float | None = None,
    ) -> None:
        if capacity <= 0 or max_cap <= 0 or capacity > max_cap:
            raise ValueError("invalid/out of range capacity")
        self.factory = factory
        self._max_cap = max_cap
        self._cond = threading.Condition()
        self._slots: deque[_Slot] = deque(_EMPTY for _ in range(capacity))
        self._closed = False
        self._capacity = capacity
        self._available = capacity
        self._active = 0
        self._in_use = 0
        self._wait_count = 0
        self._wait_ns = 0
        self._idle_closed = 0
        self._exhausted = 0
        self._idle_timeout = float(idle_timeout)
        self._log_wait = log_wait
        self._idle_timer: Timer | None = None

        if prefill_parallelism:
            limit = PREFILL_TIMEOUT if prefill_timeout is None else prefill_timeout
            self._prefill(capacity, prefill_parallelism, time.monotonic() + limit)

        if idle_timeout:
            self._idle_timer = Timer(self._idle_timeout / 10)
            self._idle_timer.start(self._close_idle_resources)

    def _prefill(self, capacity: int, parallelism: int, deadline: float) -> None:
        sem = Semaphore(parallelism)

        def fill_one() -> None:
            sem.acquire()
            try:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return
                try:
                    resource = self.get(remaining)
                except Exception:
                    return
                self.put(resource)
            finally:
                sem.release()

        workers = [
            threading.Thread(target=fill_one, name="weirkit-pool-prefill", daemon=True)
            for _ in range(capacity)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    def __enter__(self) -> ResourcePool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close every resource, waiting for those in use to be put back."""
        if self._idle_timer is not None:
            self._idle_timer.stop()
        try:
            self.set_capacity(0)
        except PoolClosedError:
            pass

    @property
    def is_closed(self) -> bool:
        return self.capacity == 0

    def _close_idle_resources(self) -> None:
        available = self.available
        idle_timeout = self.idle_timeout
        for _ in range(available):
            with self._cond:
                if not self._slots:
                    return
                slot = self._slots.popleft()
            try:
                if (
                    slot.resource is not None
                    and idle_timeout > 0
                    and slot.time_used + idle_timeout < time.monotonic()
                ):
                    slot.resource.close()
                    with self._cond:
                        self._idle_closed += 1
                    slot = self._reopen()
            finally:
                with self._cond:
                    self._slots.append(slot)
                    self._cond.notify_all()

    def _has_slot_or_closed(self) -> bool:
        return bool(self._slots) or self._closed

    def get(self, timeout: float | None = None) -> Resource:
        """Take a resource, creating one if the slot is empty.

        ``timeout`` is in seconds; ``None`` waits indefinitely and a value of
        zero or less counts as already expired.
        """
        if timeout is not None and timeout <= 0:
            raise PoolContextExpiredError()

        wait_start: float | None = None
        with self._cond:
            if not self._slots and not self._closed:
                wait_start = time.monotonic()
                start_ns = time.monotonic_ns()
                if not self._cond.wait_for(self._has_slot_or_closed, timeout):
                    raise PoolTimeoutError()
                self._wait_count += 1
                self._wait_ns += time.monotonic_ns() - start_ns
            slot = self._slots.popleft() if self._slots else None

        if wait_start is not None and self._log_wait is not None:
            self._log_wait(wait_start)
        if slot is None:
            raise PoolClosedError()

        resource = slot.resource
        created = False
        if resource is None:
            try:
                resource = self.factory()
            except BaseException:
                self._push(_EMPTY)
                raise
            created = True

        with self._cond:
            if created:
                self._active += 1
            self._available -= 1
            if self._available <= 0:
                self._exhausted += 1
            self._in_use += 1
        return resource

    def _push(self, slot: _Slot) -> None:
        with self._cond:
            self._cond.wait_for(lambda: len(self._slots) < self._max_cap)
            self._slots.append(slot)
            self._cond.notify_all()

    def put(self, resource: Resource | None) -> None:
        """Return a resource taken with :meth:`get`.

        Pass ``None`` for a resource that has been closed; a new one is
        created in its place.
        """
        if resource is not None:
            slot = _Slot(resource, time.monotonic())
        else:
            slot = self._reopen()
        with self._cond:
            if self._closed:
                raise PoolClosedError()
            if len(self._slots) >= self._max_cap:
                raise RuntimeError("attempt to put into a full ResourcePool")
            self._slots.append(slot)
            self._in_use -= 1
            self._available += 1
            self._cond.notify_all()

    def _reopen(self) -> _Slot:
        try:
            resource = self.factory()
        except Exception:
            with self._cond:
                self._active -= 1
            return _EMPTY
        return _Slot(resource, time.monotonic())

    def set_capacity(self, capacity: int) -> None:
        """Resize the pool, waiting for resources to come back when shrinking.

        A capacity of zero closes the pool.
        """
        if capacity < 0 or capacity > self._max_cap:
            raise ValueError(f"capacity {capacity} is out of range")

        with self._cond:
            old = self._capacity
            if old == 0:
                raise PoolClosedError()
            if old == capacity:
                return
            self._capacity = capacity

        if capacity < old:
            for _ in range(old - capacity):
                with self._cond:
                    self._cond.wait_for(lambda: bool(self._slots))
                    slot = self._slots.popleft()
                if slot.resource is not None:
                    slot.resource.close()
                with self._cond:
                    if slot.resource is not None:
                        self._active -= 1
                    self._available -= 1
        else:
            for _ in range(capacity - old):
                with self._cond:
                    self._cond.wait_for(lambda: len(self._slots) < self._max_cap)
                    self._slots.append(_EMPTY)
                    self._available += 1
                    self._cond.notify_all()

        if capacity == 0:
            with self._cond:
                self._closed = True
                self._cond.notify_all()

    def set_idle_timeout(self, idle_timeout: float) -> None:
        """Change the idle timeout of a pool created with one."""
        if self._idle_timer is None:
            raise RuntimeError("set_idle_timeout called when timer not initialized")
        with self._cond:
            self._idle_timeout = float(idle_timeout)
        self._idle_timer.set_interval(idle_timeout / 10)

    def stats_json(self) -> str:
        """The pool's counters as a JSON object; durations in nanoseconds."""
        return json.dumps(
            {
                "Capacity": self.capacity,
                "Available": self.available,
                "Active": self.active,
                "InUse": self.in_use,
                "MaxCapacity": self.max_cap,
                "WaitCount": self.wait_count,
                "WaitTime": self._wait_time_ns(),
                "IdleTimeout": round(self.idle_timeout * 1_000_000_000),
                "IdleClosed": self.idle_closed,
                "Exhausted": self.exhausted,
            }
        )

    def _wait_time_ns(self) -> int:
        with self._cond:
            return self._wait_ns

    @property
    def capacity(self) -> int:
        with self._cond:
            return self._capacity

    @property
    def available(self) -> int:
        """Resources free to be taken right now."""
        with self._cond:
            return self._available

    @property
    def active(self) -> int:
        """Open resources, both in the pool and handed out."""
        with self._cond:
            return self._active

    @property
    def in_use(self) -> int:
        with self._cond:
            return self._in_use

    @property
    def max_cap(self) -> int:
        return self._max_cap

    @property
    def wait_count(self) -> int:
        with self._cond:
            return self._wait_count

    @property
    def wait_time(self) -> float:
        """Total time spent waiting for resources, in seconds."""
        return self._wait_time_ns() / 1_000_000_000

    @property
    def idle_timeout(self) -> float:
        with self._cond:
            return self._idle_timeout

    @property
    def idle_closed(self) -> int:
        """Resources closed for being idle too long."""
        with self._cond:
            return self._idle_closed

    @property
    def exhausted(self) -> int:
        """Times the number of available resources dropped below one."""
        with self._cond:
            return self._exhausted