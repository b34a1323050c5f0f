"""Full-duplex streaming link over a websocket."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException, ConnectionClosedError

from session_channel.state.settings import TransportSettings
from session_channel.errors import TransportError, LinkClosedError
from session_channel.protocol.envelope import decode_envelope, encode_envelope
from session_channel.config.transport import (
    WS_PING_TIMEOUT_S,
    WS_PING_INTERVAL_S,
    TRANSPORT_WEBSOCKET,
    REASON_PING_TIMEOUT,
    WS_MAX_MESSAGE_BYTES,
    WS_CLOSE_NORMAL_CODE,
    REASON_TRANSPORT_CLOSE,
    REASON_TRANSPORT_ERROR,
    REASON_SERVER_DISCONNECT,
    WS_CLOSE_INTERNAL_ERROR_CODE,
)

from .urls import ws_url

logger = logging.getLogger(__name__)


def close_reason(exc: ConnectionClosed) -> str:
    """Classify a closed websocket into a channel disconnect reason."""
    rcvd = exc.rcvd
    if rcvd is not None and rcvd.code == WS_CLOSE_NORMAL_CODE:
        return REASON_SERVER_DISCONNECT
    if isinstance(exc, ConnectionClosedError):
        sent = exc.sent
        if rcvd is None and sent is not None and sent.code == WS_CLOSE_INTERNAL_ERROR_CODE:
            # websockets closes with 1011 when a keepalive ping goes unanswered.
            return REASON_PING_TIMEOUT
        return REASON_TRANSPORT_ERROR
    return REASON_TRANSPORT_CLOSE


class WebSocketLink:
    name = TRANSPORT_WEBSOCKET

    def __init__(self, ws: Any) -> None:
        self._ws = ws

    @classmethod
    async def open(cls, settings: TransportSettings) -> WebSocketLink:
        url = ws_url(settings.server_url, settings.ws_path)
        try:
            ws = await websockets.connect(
                url,
                open_timeout=settings.timeout_s,
                ping_interval=WS_PING_INTERVAL_S,
                ping_timeout=WS_PING_TIMEOUT_S,
                max_size=WS_MAX_MESSAGE_BYTES,
            )
        except (OSError, TimeoutError, WebSocketException) as exc:
            raise TransportError(f"websocket connect to {url} failed: {exc or exc.__class__.__name__}") from exc
        logger.debug("websocket open: %s", url)
        return cls(ws)

    async def send(self, event: str, payload: Any = None) -> None:
        try:
            await self._ws.send(encode_envelope(event, payload))
        except ConnectionClosed as exc:
            raise LinkClosedError(close_reason(exc), str(exc)) from exc

    async def recv(self) -> tuple[str, Any]:
        try:
            raw = await self._ws.recv()
        except ConnectionClosed as exc:
            raise LinkClosedError(close_reason(exc), str(exc)) from exc
        return decode_envelope(raw)

    async def close(self) -> None:
        with contextlib.suppress(Exception):
            await self._ws.close(code=WS_CLOSE_NORMAL_CODE)


__all__ = ["WebSocketLink", "close_reason"]
