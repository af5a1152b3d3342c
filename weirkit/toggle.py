"""A double-buffered value that can be switched atomically."""

from __future__ import annotations

import threading
from typing import Any


class ToggleNotPreparedError(Exception):
    """Raised when toggling before another value has been staged."""

    def __init__(self) -> None:
        super().__init__("not prepared")


class Toggle:
    """Holds a current value and a staged one, swapped on demand."""

    def __init__(self, initial: Any) -> None:
        self._data: list[Any] = [initial, None]
        self._idx = 0
        self._prepared = False
        self._lock = threading.Lock()

    @property
    def current(self) -> Any:
        with self._lock:
            return self._data[self._idx]

    def swap_other(self, value: Any) -> Any:
        """Stage ``value`` as the next one and return what was staged before."""
        with self._lock:
            other = 1 - self._idx
            previous = self._data[other]
            self._data[other] = value
            self._prepared = True
            return previous

    def toggle(self) -> None:
        """Make the staged value current."""
        with self._lock:
            if not self._prepared:
                raise ToggleNotPreparedError()
            self._idx = 1 - self._idx
            self._prepared = False