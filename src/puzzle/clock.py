"""
Elapsed time for a single board.

Uses a monotonic time source so wall-clock adjustments never move the timer.
The clock only measures; deciding WHEN to start, pause or resume belongs to the Board / registry.
"""

import time
from typing import Callable, Optional

TimeSource = Callable[[], float]


def monotonic_ms() -> float:
    return time.perf_counter() * 1000


class Clock:
    """
    Elapsed time tracker with pause / resume.

    - live: elapsed = now - reference instant
    - paused: elapsed = the value frozen at the last pause
    - finalized: elapsed frozen forever, every other call becomes a no-op
    """

    def __init__(self, time_source: TimeSource = monotonic_ms) -> None:
        self._now = time_source
        self.reference_ms: Optional[float] = None
        self.elapsed_ms: float = 0.0
        self.final_ms: Optional[float] = None

    @property
    def is_live(self) -> bool:
        return self.reference_ms is not None

    @property
    def is_final(self) -> bool:
        return self.final_ms is not None

    def start(self) -> None:
        if self.is_final:
            return
        self.reference_ms = self._now()
        self.elapsed_ms = 0.0

    def resume(self, elapsed_ms: float) -> None:
        """Continue seamlessly from a previously frozen value."""
        if self.is_final:
            return
        self.elapsed_ms = max(0.0, float(elapsed_ms))
        self.reference_ms = self._now() - self.elapsed_ms

    def sample(self) -> float:
        if self.is_final:
            return self.final_ms
        if self.reference_ms is None:
            return self.elapsed_ms
        self.elapsed_ms = max(0.0, self._now() - self.reference_ms)
        return self.elapsed_ms

    def pause(self) -> float:
        elapsed = self.sample()
        self.reference_ms = None
        return elapsed

    def finalize(self) -> float:
        if self.is_final:
            return self.final_ms
        self.final_ms = max(0.0, self.pause())
        self.elapsed_ms = self.final_ms
        return self.final_ms

    def restore(self, elapsed_ms: float, final_ms: Optional[float] = None) -> None:
        """Reconstitute a clock from a snapshot. Always paused: the caller decides when to resume."""
        self.reference_ms = None
        self.elapsed_ms = max(0.0, float(elapsed_ms))
        self.final_ms = None if final_ms is None else max(0.0, float(final_ms))
