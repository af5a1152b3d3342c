"""A counting semaphore with an optional acquire timeout."""

from __future__ import annotations

import threading


class Semaphore:
    """Counting semaphore; a timeout of zero waits indefinitely."""

    def __init__(self, count: int, timeout: float = 0.0) -> None:
        if count <= 0:
            raise ValueError("semaphore count must be positive")
        self._capacity = count
        self._available = count
        self._timeout = timeout
        self._cond = threading.Condition()

    def acquire(self) -> bool:
        """Take a slot; return False if the timeout expired first."""
        with self._cond:
            if self._timeout <= 0:
                self._cond.wait_for(lambda: self._available > 0)
            elif not self._cond.wait_for(lambda: self._available > 0, self._timeout):
                return False
            self._available -= 1
            return True

    def try_acquire(self) -> bool:
        """Take a slot only if one is free right now."""
        with self._cond:
            if self._available > 0:
                self._available -= 1
                return True
            return False

    def release(self) -> None:
        """Give back a slot taken earlier."""
        with self._cond:
            if self._available >= self._capacity:
                raise ValueError("semaphore released more times than acquired")
            self._available += 1
            self._cond.notify()

    @property
    def size(self) -> int:
        """The number of free slots."""
        with self._cond:
            return self._available

    def __enter__(self) -> Semaphore:
        if not self.acquire():
            raise TimeoutError("semaphore acquire timed out")
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()