"""A sliding window of time cells that counts named events."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field


def now_ms() -> int:
    """The current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass
class Cell:
    """One slice of a window: its start time and per-metric counts."""

    start_ms: int = 0
    stats: Counter[str] = field(default_factory=Counter)

    def reset(self) -> None:
        self.start_ms = 0
        self.stats = Counter()


class SlidingWindow:
    """A ring of ``size`` cells, each ``cell_interval_ms`` long.

    Time since the epoch is cut into cell-sized segments that map onto the
    ring. Cells are refreshed lazily when hit, and cells that fell out of the
    window are ignored when counting.
    """

    def __init__(self, size: int, cell_interval_ms: int) -> None:
        if size <= 0:
            raise ValueError("window size must be positive")
        if cell_interval_ms <= 0:
            raise ValueError("cell interval must be positive")
        self.size = size
        self.cell_interval_ms = cell_interval_ms
        self.cells = [Cell() for _ in range(size)]

    def _cell(self, now_ms: int) -> Cell:
        return self.cells[now_ms // self.cell_interval_ms % self.size]

    def _cell_start_ms(self, now_ms: int) -> int:
        return now_ms - now_ms % self.cell_interval_ms

    def hit(self, now_ms: int, *args: str) -> None:
        """Count one event for each metric name given."""
        cell = self._cell(now_ms)
        if now_ms - cell.start_ms >= self.cell_interval_ms:
            cell.start_ms = self._cell_start_ms(now_ms)
            cell.stats = Counter()
        cell.stats.update(args)

    def get_hits(self, now_ms: int, *args: str) -> dict[str, int]:
        """Sum the counts of the named metrics over the whole window."""
        window_start = now_ms - self.size * self.cell_interval_ms
        stats = dict.fromkeys(args, 0)
        for cell in self.cells:
            if cell.start_ms < window_start:
                continue
            for name in args:
                stats[name] += cell.stats[name]
        return stats

    def get_now_hits(self, now_ms: int, *args: str) -> dict[str, int]:
        """The counts of the named metrics in the cell that holds ``now_ms``."""
        cell = self._cell(now_ms)
        stats = dict.fromkeys(args, 0)
        for name in args:
            stats[name] += cell.stats[name]
        return stats

    def get_hit(self, now_ms: int, metric_name: str) -> int:
        """The count of one metric over the whole window."""
        return self.get_hits(now_ms, metric_name)[metric_name]

    def get_actual_duration_ms(self, now_ms: int) -> int:
        """The time the window actually covers, given ``now_ms`` may fall mid-cell."""
        return (self.size - 1) * self.cell_interval_ms + now_ms % self.cell_interval_ms