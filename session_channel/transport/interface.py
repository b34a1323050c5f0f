"""What a session channel needs from its transport."""

from __future__ import annotations

from typing import Any, Protocol

from .emitter import Listener, AnyListener


class ChannelTransport(Protocol):
    @property
    def connected(self) -> bool: ...

    def on(self, event: str, handler: Listener) -> None: ...
    def off(self, event: str, handler: Listener | None = None) -> None: ...
    def on_any(self, handler: AnyListener) -> None: ...
    def remove_all_listeners(self) -> None: ...
    def emit(self, event: str, payload: Any = None) -> None: ...
    def connect(self) -> None: ...
    def disconnect(self) -> None: ...
    async def aclose(self) -> None: ...


__all__ = ["ChannelTransport"]
