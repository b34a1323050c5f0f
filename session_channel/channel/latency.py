"""Round-trip latency from application-level ping/pong."""

from __future__ import annotations

import time
from collections.abc import Callable


class LatencyProbe:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.last_ping_ts: float | None = None
        self.latency_s: float | None = None

    def mark_sent(self) -> None:
        self.last_ping_ts = self._clock()

    def record_pong(self) -> float | None:
        # A pong with no ping on record leaves the measurement untouched.
        if self.last_ping_ts is None:
            return None
        self.latency_s = max(0.0, self._clock() - self.last_ping_ts)
        return self.latency_s


__all__ = ["LatencyProbe"]
