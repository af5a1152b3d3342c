"""Thread-safe value holders with compare-and-swap semantics."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Generic, TypeVar

T = TypeVar("T")


class _Atomic(Generic[T]):
    """A value guarded by a lock, read and written as a whole."""

    __slots__ = ("_lock", "_value")

    def __init__(self, value: T) -> None:
        self._lock = threading.Lock()
        self._value = self._coerce(value)

    @staticmethod
    def _coerce(value: T) -> T:
        return value

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    @value.setter
    def value(self, new: T) -> None:
        new = self._coerce(new)
        with self._lock:
            self._value = new

    def _swap_if_equal(self, old: T, new: T) -> bool:
        old = self._coerce(old)
        new = self._coerce(new)
        with self._lock:
            if self._value == old:
                self._value = new
                return True
            return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class AtomicInt(_Atomic[int]):
    """An integer that can be updated atomically."""

    __slots__ = ()

    def __init__(self, value: int = 0) -> None:
        super().__init__(value)

    @staticmethod
    def _coerce(value: int) -> int:
        return int(value)

    def add(self, delta: int) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value += int(delta)
            return self._value

    def compare_and_swap(self, old: int, new: int) -> bool:
        """Replace the value with ``new`` if it currently equals ``old``."""
        return self._swap_if_equal(old, new)


class AtomicDuration(_Atomic[timedelta]):
    """A duration that can be updated atomically."""

    __slots__ = ()

    def __init__(self, value: timedelta = timedelta(0)) -> None:
        super().__init__(value)

    def add(self, delta: timedelta) -> timedelta:
        """Add ``delta`` and return the new duration."""
        with self._lock:
            self._value += delta
            return self._value

    def compare_and_swap(self, old: timedelta, new: timedelta) -> bool:
        """Replace the duration with ``new`` if it currently equals ``old``."""
        return self._swap_if_equal(old, new)


class AtomicBool(_Atomic[bool]):
    """A boolean that can be updated atomically."""

    __slots__ = ()

    def __init__(self, value: bool = False) -> None:
        super().__init__(value)

    @staticmethod
    def _coerce(value: bool) -> bool:
        return bool(value)

    def compare_and_swap(self, old: bool, new: bool) -> bool:
        """Replace the flag with ``new`` if it currently equals ``old``."""
        return self._swap_if_equal(old, new)


class AtomicString(_Atomic[str]):
    """A string that can be updated atomically."""

    __slots__ = ()

    def __init__(self, value: str = "") -> None:
        super().__init__(value)

    def compare_and_swap(self, old: str, new: str) -> bool:
        """Replace the string with ``new`` if it currently equals ``old``."""
        return self._swap_if_equal(old, new)


class BoolIndex:
    """A switch between the two slots of a double buffer."""

    __slots__ = ("_lock", "_index")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._index = 0

    def set(self, value: bool) -> None:
        with self._lock:
            self._index = 1 if value else 0

    def get(self) -> tuple[int, int, bool]:
        """Return the current index, the other index and the flag."""
        with self._lock:
            index = self._index
        if index == 1:
            return 1, 0, True
        return 0, 1, False