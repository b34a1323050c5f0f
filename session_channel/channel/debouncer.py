"""Coalesces keystrokes into one typing_start/typing_stop pair."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from session_channel.config.protocol import EVENT_TYPING_STOP, EVENT_TYPING_START


class TypingDebouncer:
    def __init__(
        self,
        quiet_period_s: float,
        *,
        emit: Callable[[str], None],
        can_emit: Callable[[], bool],
    ) -> None:
        self.quiet_period_s = float(quiet_period_s)
        self._emit = emit
        self._can_emit = can_emit
        self._is_typing = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_typing(self) -> bool:
        return self._is_typing

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        if not self._can_emit() or self._is_typing:
            return
        self._is_typing = True
        self._emit(EVENT_TYPING_START)

    def stop(self) -> None:
        if not self._can_emit() or not self._is_typing:
            return
        self._is_typing = False
        self._emit(EVENT_TYPING_STOP)

    def touch(self) -> None:
        """Register a keystroke: start typing now, stop after the quiet period."""
        self.start()
        self.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.quiet_period_s, self._on_quiet)

    def _on_quiet(self) -> None:
        self._timer = None
        self.stop()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def reset(self) -> None:
        self.cancel()
        self._is_typing = False


__all__ = ["TypingDebouncer"]
