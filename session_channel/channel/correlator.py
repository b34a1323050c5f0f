"""Pairs fire-and-forget requests with their later replies."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections import deque
from dataclasses import dataclass

from session_channel.errors import RequestTimeoutError

from .keys import RequestKey

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Waiter:
    future: asyncio.Future
    timer: asyncio.TimerHandle | None = None

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class RequestCorrelator:
    """FIFO waiter queues, one per request key.

    A reply resolves the oldest waiter of its key that is still pending.
    Waiters the caller already cancelled are skipped.
    """

    def __init__(self) -> None:
        self._waiters: dict[RequestKey, deque[_Waiter]] = {key: deque() for key in RequestKey}

    def register(self, key: RequestKey, timeout_s: float | None = None) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        waiter = _Waiter(future=loop.create_future())
        if timeout_s:
            waiter.timer = loop.call_later(timeout_s, self._expire, key, waiter, timeout_s)
        self._waiters[key].append(waiter)
        return waiter.future

    def _expire(self, key: RequestKey, waiter: _Waiter, timeout_s: float) -> None:
        waiter.timer = None
        queue = self._waiters[key]
        if waiter in queue:
            queue.remove(waiter)
        if not waiter.future.done():
            logger.info("'%s' request timed out after %.1fs", key.value, timeout_s)
            waiter.future.set_exception(RequestTimeoutError(key.value, timeout_s))

    def resolve(self, key: RequestKey, value: Any) -> bool:
        queue = self._waiters[key]
        while queue:
            waiter = queue.popleft()
            waiter.cancel_timer()
            if waiter.future.done():
                continue
            waiter.future.set_result(value)
            return True
        logger.debug("'%s' reply with no outstanding request; dropped", key.value)
        return False

    def pending(self, key: RequestKey | None = None) -> int:
        keys = (key,) if key is not None else tuple(RequestKey)
        return sum(1 for k in keys for waiter in self._waiters[k] if not waiter.future.done())

    def cancel_all(self) -> int:
        cancelled = 0
        for queue in self._waiters.values():
            while queue:
                waiter = queue.popleft()
                waiter.cancel_timer()
                if waiter.future.cancel():
                    cancelled += 1
        return cancelled


__all__ = ["RequestCorrelator"]
