"""Reconnecting event transport over websocket or long-polling links."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from dataclasses import dataclass
from collections.abc import Mapping, Callable, Awaitable

from session_channel.state.settings import TransportSettings
from session_channel.errors import ProtocolError, TransportError, LinkClosedError
from session_channel.config.protocol import (
    EVENT_CONNECT,
    EVENT_DISCONNECT,
    LIFECYCLE_EVENTS,
    EVENT_CONNECT_ERROR,
    EVENT_RECONNECT_FAILED,
)
from session_channel.config.transport import (
    TRANSPORT_POLLING,
    TRANSPORT_WEBSOCKET,
    REASON_CLIENT_DISCONNECT,
    REASON_SERVER_DISCONNECT,
)

from .link import TransportLink
from .backoff import Backoff
from .emitter import EventTransport
from .polling import PollingLink
from .websocket import WebSocketLink

logger = logging.getLogger(__name__)

LinkOpener = Callable[[TransportSettings], Awaitable[TransportLink]]

DEFAULT_LINK_OPENERS: dict[str, LinkOpener] = {
    TRANSPORT_WEBSOCKET: WebSocketLink.open,
    TRANSPORT_POLLING: PollingLink.open,
}


@dataclass(slots=True)
class _LinkSession:
    link: TransportLink
    outbox: asyncio.Queue[tuple[str, Any]]
    failure: str | None = None


class ReconnectingTransport(EventTransport):
    """Named-event transport with bounded, backed-off reconnection.

    Lifecycle events fired to listeners:

    - ``connect`` once a link is open
    - ``disconnect(reason)`` when an open link goes away
    - ``connect_error(exc)`` when every mechanism failed to open
    - ``reconnect_failed(attempts)`` once the attempt cap is exhausted

    A server-initiated close (``"io server disconnect"``) stops the policy;
    a ``disconnect`` listener may call ``connect()`` to resume.
    """

    def __init__(
        self,
        settings: TransportSettings,
        *,
        links: Mapping[str, LinkOpener] | None = None,
        backoff: Backoff | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self._openers = dict(links if links is not None else DEFAULT_LINK_OPENERS)
        self._backoff = backoff or Backoff(
            min_s=settings.delay_s,
            max_s=settings.delay_max_s,
            jitter=settings.randomization_factor,
        )
        self._session: _LinkSession | None = None
        self._task: asyncio.Task[None] | None = None
        self._active = False
        self.attempts = 0

    @property
    def connected(self) -> bool:
        return self._session is not None

    @property
    def mechanism(self) -> str | None:
        """Name of the link currently carrying frames, if any."""
        return self._session.link.name if self._session is not None else None

    def connect(self) -> None:
        self._active = True
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def disconnect(self) -> None:
        was_connected = self._session is not None
        self._active = False
        self._session = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        if was_connected:
            self._dispatch(EVENT_DISCONNECT, REASON_CLIENT_DISCONNECT)

    async def aclose(self) -> None:
        task = self._task
        self.disconnect()
        if task is not None and task is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def emit(self, event: str, payload: Any = None) -> None:
        session = self._session
        if session is None:
            logger.debug("dropping '%s': transport not connected", event)
            return
        session.outbox.put_nowait((event, payload))

    def _may_retry(self) -> bool:
        return self.settings.reconnection and self.attempts <= self.settings.max_attempts

    async def _run(self) -> None:
        while self._active:
            link = await self._open_link()
            if link is None:
                self.attempts += 1
                if not self._may_retry():
                    self._active = False
                    logger.warning("giving up after %d connection attempts", self.attempts)
                    self._dispatch(EVENT_RECONNECT_FAILED, self.attempts)
                    return
                await asyncio.sleep(self._backoff.duration())
                continue

            self.attempts = 0
            self._backoff.reset()
            reason = await self._serve(link)

            if reason == REASON_SERVER_DISCONNECT:
                self._active = False
            elif not self.settings.reconnection:
                self._active = False
            self._dispatch(EVENT_DISCONNECT, reason)
            if not self._active:
                return
            if reason != REASON_SERVER_DISCONNECT:
                await asyncio.sleep(self._backoff.duration())

    async def _open_link(self) -> TransportLink | None:
        failures: list[str] = []
        for name in self.settings.transports:
            opener = self._openers.get(name)
            if opener is None:
                failures.append(f"{name}: unsupported")
                continue
            try:
                link = await asyncio.wait_for(opener(self.settings), timeout=self.settings.timeout_s)
            except TimeoutError:
                failures.append(f"{name}: timed out after {self.settings.timeout_s:.1f}s")
                continue
            except (TransportError, OSError) as exc:
                failures.append(f"{name}: {exc}")
                continue
            logger.info("connected via %s", name)
            return link

        error = TransportError("; ".join(failures) or "no transports configured")
        logger.info("connection attempt failed: %s", error)
        self._dispatch(EVENT_CONNECT_ERROR, error)
        return None

    async def _serve(self, link: TransportLink) -> str:
        session = _LinkSession(link=link, outbox=asyncio.Queue())
        self._session = session
        sender = asyncio.create_task(self._send_loop(session))
        try:
            self._dispatch(EVENT_CONNECT)
            reason = await self._read_loop(session)
        finally:
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender
            if self._session is session:
                self._session = None
            await link.close()
        return session.failure or reason

    async def _send_loop(self, session: _LinkSession) -> None:
        while True:
            event, payload = await session.outbox.get()
            try:
                await session.link.send(event, payload)
            except LinkClosedError as exc:
                logger.info("send on %s link failed (%s)", session.link.name, exc)
                session.failure = exc.reason
                await session.link.close()
                return

    async def _read_loop(self, session: _LinkSession) -> str:
        link = session.link
        while True:
            try:
                event, payload = await link.recv()
            except LinkClosedError as exc:
                logger.info("%s link closed (%s)", link.name, exc)
                return exc.reason
            except ProtocolError as exc:
                logger.warning("dropping malformed frame: %s", exc)
                continue
            if event in LIFECYCLE_EVENTS:
                logger.warning("dropping reserved event name from server: %s", event)
                continue
            self._dispatch_inbound(event, payload)


__all__ = ["DEFAULT_LINK_OPENERS", "LinkOpener", "ReconnectingTransport"]
