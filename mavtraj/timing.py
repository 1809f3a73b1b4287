"""Running statistics of samples and a small stopwatch."""

from __future__ import annotations

import math
from collections import deque
from time import perf_counter


class Accumulator:
    """Totals over all samples plus statistics over a sliding window."""

    def __init__(self, window: int = 50):
        if window <= 0:
            raise ValueError("window must be positive")
        self._window: deque[float] = deque(maxlen=window)
        self._window_sum = 0.0
        self._total_samples = 0
        self._sum = 0.0
        self._min = math.inf
        self._max = -math.inf

    def add(self, sample: float) -> None:
        if len(self._window) == self._window.maxlen:
            self._window_sum += sample - self._window[0]
        else:
            self._window_sum += sample
        self._window.append(sample)
        self._sum += sample
        self._total_samples += 1
        self._max = max(self._max, sample)
        self._min = min(self._min, sample)

    def total_samples(self) -> int:
        return self._total_samples

    def sum(self) -> float:
        return self._sum

    def mean(self) -> float:
        if self._total_samples == 0:
            return math.nan
        return self._sum / self._total_samples

    def rolling_mean(self) -> float:
        if not self._window:
            return math.nan
        return self._window_sum / len(self._window)

    def max(self) -> float:
        return self._max

    def min(self) -> float:
        return self._min

    def lazy_variance(self) -> float:
        """Population variance of the samples in the window."""
        if not self._window:
            return 0.0
        mean = self.rolling_mean()
        return sum((s - mean) ** 2 for s in self._window) / len(self._window)


class MiniTimer:
    """Stopwatch measuring seconds between start and stop."""

    def __init__(self):
        self._start = perf_counter()
        self._end: float | None = None

    def start(self) -> None:
        self._start = perf_counter()

    def stop(self) -> float:
        self._end = perf_counter()
        return self.elapsed()

    def elapsed(self) -> float:
        if self._end is None or self._end < self._start:
            return 0.0
        return self._end - self._start