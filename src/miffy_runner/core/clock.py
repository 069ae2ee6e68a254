"""Frame clock with spike-guarded delta time."""

import time
from typing import Callable


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds."""
    return time.perf_counter() * 1000.0


class FrameClock:
    """Turns wall-clock timestamps into clamped per-frame deltas.

    Each call to ``tick`` returns ``min(now - last, max_delta_ms)`` and moves
    ``last`` forward. A clock that jumps backwards yields a zero delta.
    """

    def __init__(
        self,
        max_delta_ms: float = 34.0,
        time_source: Callable[[], float] = monotonic_ms,
        start_ms: float | None = None,
    ) -> None:
        self.max_delta_ms = max_delta_ms
        self._time_source = time_source
        self._last_ms = time_source() if start_ms is None else start_ms
        self._delta_ms = 0.0
        self._frame = 0

    @property
    def last_ms(self) -> float:
        """Timestamp of the most recent tick."""
        return self._last_ms

    @property
    def delta_ms(self) -> float:
        """Delta produced by the most recent tick."""
        return self._delta_ms

    @property
    def frame(self) -> int:
        return self._frame

    def now(self) -> float:
        return self._time_source()

    def tick(self, now_ms: float | None = None) -> float:
        """Advance to ``now_ms`` (or the time source) and return the delta."""
        if now_ms is None:
            now_ms = self._time_source()
        self._delta_ms = max(0.0, min(now_ms - self._last_ms, self.max_delta_ms))
        self._last_ms = now_ms
        self._frame += 1
        return self._delta_ms
