"""
Phase timer for the benchmark driver.

A Timer starts the moment it is constructed and is frozen by its first
`stop()`. Durations are whole milliseconds; rates are operations per second
derived from the expected operation count rather than from observed calls.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Dict, Optional


class Timer:
    """
    Wall-clock timer for one labeled benchmark phase.

    Parameters
    ----------
    label : str
        Phase name printed in the summary line (e.g., "Writes").
    expected_count : int
        Number of operations the phase performs.
    clock : Callable[[], float]
        Monotonic clock returning seconds; injectable for tests.
    """

    def __init__(
        self,
        label: str,
        expected_count: int,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.label = label
        self.expected_count = expected_count
        self._clock = clock
        self.start_time = clock()
        self.end_time: Optional[float] = None

    @property
    def stopped(self) -> bool:
        return self.end_time is not None

    def stop(self) -> str:
        """Freeze the end time on the first call and return the summary line."""
        if self.end_time is None:
            self.end_time = self._clock()
        return str(self)

    def duration(self) -> int:
        """Elapsed milliseconds; live until `stop()` has been called."""
        end = self.end_time if self.end_time is not None else self._clock()
        return max(0, int((end - self.start_time) * 1000))

    def rate(self) -> float:
        """Operations per second, or infinity for a zero-length phase."""
        duration = self.duration()
        if duration == 0:
            return math.inf
        return self.expected_count * 1000.0 / duration

    def as_dict(self) -> Dict[str, Any]:
        rate = self.rate()
        return {
            "label": self.label,
            "count": self.expected_count,
            "duration_ms": self.duration(),
            "rate_ops_per_sec": round(rate, 2) if math.isfinite(rate) else None,
        }

    def __str__(self) -> str:
        return (
            f"\t{self.label}: {self.expected_count:,} "
            f"duration: {self.duration():,} ms "
            f"rate: {self.rate():,.2f} ops/sec"
        )

    def __repr__(self) -> str:
        return (
            f"Timer(label={self.label!r}, expected_count={self.expected_count}, "
            f"stopped={self.stopped})"
        )


__all__ = ["Timer"]
