"""Request/response long-polling fallback link.

Wire contract (all bodies are JSON):

- ``POST {poll_path}`` opens a session and returns ``{"sid": "..."}``.
- ``GET {poll_path}?sid=...`` long-polls and returns
  ``{"frames": [envelope, ...], "closed": bool}``.
- ``POST {poll_path}?sid=...`` delivers ``{"frames": [envelope]}``.
- ``DELETE {poll_path}?sid=...`` ends the session.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections import deque

import httpx
import orjson

from session_channel.state.settings import TransportSettings
from session_channel.protocol.envelope import build_envelope, parse_envelope
from session_channel.errors import ProtocolError, TransportError, LinkClosedError
from session_channel.config.transport import (
    POLL_WAIT_S,
    POLL_KEY_SID,
    POLL_KEY_CLOSED,
    POLL_KEY_FRAMES,
    TRANSPORT_POLLING,
    POLL_GONE_STATUS_CODES,
    REASON_TRANSPORT_CLOSE,
    REASON_TRANSPORT_ERROR,
    REASON_SERVER_DISCONNECT,
)

from .urls import http_url

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"content-type": "application/json"}


def _decode_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = orjson.loads(response.content) if response.content else {}
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"invalid JSON from polling endpoint: {exc}") from exc
    if not isinstance(body, dict):
        raise ProtocolError("polling response must be a JSON object")
    return body


class PollingLink:
    name = TRANSPORT_POLLING

    def __init__(self, client: httpx.AsyncClient, url: str, sid: str) -> None:
        self._client = client
        self._url = url
        self._sid = sid
        self._pending: deque[Any] = deque()
        self._closed_reason: str | None = None

    @property
    def sid(self) -> str:
        return self._sid

    @classmethod
    async def open(
        cls,
        settings: TransportSettings,
        *,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> PollingLink:
        url = http_url(settings.server_url, settings.poll_path)
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout_s, read=POLL_WAIT_S + settings.timeout_s),
            transport=http_transport,
        )
        try:
            response = await client.post(url)
            response.raise_for_status()
            sid = _decode_body(response).get(POLL_KEY_SID)
            if not isinstance(sid, str) or not sid:
                raise ProtocolError("polling handshake returned no sid")
        except (httpx.HTTPError, ProtocolError) as exc:
            await client.aclose()
            raise TransportError(f"polling handshake with {url} failed: {exc}") from exc
        except BaseException:
            # Cancelled by the connect timeout; the pool must not outlive the attempt.
            await asyncio.shield(client.aclose())
            raise
        logger.debug("polling session open: %s sid=%s", url, sid)
        return cls(client, url, sid)

    async def send(self, event: str, payload: Any = None) -> None:
        if self._closed_reason is not None:
            raise LinkClosedError(self._closed_reason)
        body = orjson.dumps({POLL_KEY_FRAMES: [build_envelope(event, payload)]})
        try:
            response = await self._client.post(
                self._url, params={POLL_KEY_SID: self._sid}, content=body, headers=_JSON_HEADERS
            )
        except httpx.HTTPError as exc:
            raise LinkClosedError(REASON_TRANSPORT_ERROR, str(exc)) from exc
        if response.status_code in POLL_GONE_STATUS_CODES:
            self._closed_reason = REASON_TRANSPORT_CLOSE
            raise LinkClosedError(REASON_TRANSPORT_CLOSE, f"HTTP {response.status_code}")
        if response.is_error:
            raise LinkClosedError(REASON_TRANSPORT_ERROR, f"HTTP {response.status_code}")

    async def _poll(self) -> None:
        try:
            response = await self._client.get(self._url, params={POLL_KEY_SID: self._sid})
        except httpx.TimeoutException:
            # Long-poll window elapsed without frames; poll again.
            return
        except httpx.HTTPError as exc:
            self._closed_reason = REASON_TRANSPORT_ERROR
            logger.debug("poll request failed: %s", exc)
            return
        if response.status_code in POLL_GONE_STATUS_CODES:
            self._closed_reason = REASON_TRANSPORT_CLOSE
            return
        if response.is_error:
            self._closed_reason = REASON_TRANSPORT_ERROR
            return

        try:
            body = _decode_body(response)
        except ProtocolError:
            self._closed_reason = REASON_TRANSPORT_ERROR
            raise
        frames = body.get(POLL_KEY_FRAMES) or []
        if isinstance(frames, list):
            self._pending.extend(frames)
        if body.get(POLL_KEY_CLOSED):
            self._closed_reason = REASON_SERVER_DISCONNECT

    async def recv(self) -> tuple[str, Any]:
        while not self._pending:
            if self._closed_reason is not None:
                raise LinkClosedError(self._closed_reason)
            await self._poll()
        return parse_envelope(self._pending.popleft())

    async def close(self) -> None:
        if self._closed_reason is None:
            self._closed_reason = REASON_TRANSPORT_CLOSE
            with contextlib.suppress(httpx.HTTPError):
                await self._client.delete(self._url, params={POLL_KEY_SID: self._sid})
        await self._client.aclose()


__all__ = ["PollingLink"]
