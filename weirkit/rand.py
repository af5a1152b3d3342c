"""A pseudo-random generator safe to share between threads."""

from __future__ import annotations

import random
import struct
import threading


def _require_positive(n: int) -> None:
    if n <= 0:
        raise ValueError(f"invalid argument: n must be positive, got {n}")


class LockedRandom:
    """Serialises access to a :class:`random.Random` with a lock."""

    def __init__(self, source: random.Random | int | None = None) -> None:
        if isinstance(source, random.Random):
            self._rand = source
        else:
            self._rand = random.Random(source)
        self._lock = threading.Lock()

    def int63(self) -> int:
        """A non-negative integer of 63 random bits."""
        with self._lock:
            return self._rand.getrandbits(63)

    def uint32(self) -> int:
        with self._lock:
            return self._rand.getrandbits(32)

    def uint64(self) -> int:
        with self._lock:
            return self._rand.getrandbits(64)

    def int31(self) -> int:
        """A non-negative integer of 31 random bits."""
        with self._lock:
            return self._rand.getrandbits(31)

    def int(self) -> int:
        """A non-negative random integer."""
        with self._lock:
            return self._rand.getrandbits(63)

    def int63n(self, n: int) -> int:
        """A random integer in ``[0, n)``."""
        _require_positive(n)
        with self._lock:
            return self._rand.randrange(n)

    def int31n(self, n: int) -> int:
        """A random integer in ``[0, n)``."""
        _require_positive(n)
        with self._lock:
            return self._rand.randrange(n)

    def intn(self, n: int) -> int:
        """A random integer in ``[0, n)``."""
        _require_positive(n)
        with self._lock:
            return self._rand.randrange(n)

    def float64(self) -> float:
        """A random float in ``[0.0, 1.0)``."""
        with self._lock:
            return self._rand.random()

    def float32(self) -> float:
        """A random single-precision float in ``[0.0, 1.0)``."""
        with self._lock:
            while True:
                (value,) = struct.unpack("f", struct.pack("f", self._rand.random()))
                if value < 1.0:
                    return value