"""Exponential reconnection backoff with jitter."""

from __future__ import annotations

import random

from session_channel.config.transport import RECONNECTION_BACKOFF_FACTOR


class Backoff:
    """Delay sequence ``min_s * factor**attempt`` with +/- jitter, capped at ``max_s``.

    Disabled jitter (``jitter=0``) yields a deterministic sequence.
    """

    def __init__(
        self,
        *,
        min_s: float,
        max_s: float,
        jitter: float = 0.0,
        factor: float = RECONNECTION_BACKOFF_FACTOR,
        rng: random.Random | None = None,
    ) -> None:
        self.min_s = max(0.0, float(min_s))
        self.max_s = max(self.min_s, float(max_s))
        self.jitter = min(1.0, max(0.0, float(jitter)))
        self.factor = max(1.0, float(factor))
        self.attempts = 0
        self._rng = rng or random.Random()

    def duration(self) -> float:
        delay = self.min_s * (self.factor**self.attempts)
        self.attempts += 1
        if self.jitter > 0:
            deviation = self._rng.random() * self.jitter * delay
            delay = delay - deviation if self._rng.random() < 0.5 else delay + deviation
        return min(self.max_s, max(0.0, delay))

    def reset(self) -> None:
        self.attempts = 0


__all__ = ["Backoff"]
