"""Interface of one open connection over a concrete transport mechanism."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TransportLink(Protocol):
    """An open bidirectional frame pipe.

    ``recv`` returns one decoded envelope ``(event, payload)`` and raises
    ``LinkClosedError`` with a disconnect reason once the link is gone.
    """

    name: str

    async def send(self, event: str, payload: Any = None) -> None: ...
    async def recv(self) -> tuple[str, Any]: ...
    async def close(self) -> None: ...


__all__ = ["TransportLink"]
