"""Client-side session channel: connection lifecycle, handshake, and event fan-out.

All public methods are synchronous and return immediately; work that needs
the network is handed to the transport, which runs on the caller's event
loop. Correlated requests return ``asyncio.Future`` objects.
"""

from __future__ import annotations

import time
import asyncio
import logging
from typing import Any
from functools import partial
from collections.abc import Callable

from session_channel.state.status import ChannelStatus
from session_channel.runtime.settings_loader import load_settings
from session_channel.transport.client import ReconnectingTransport
from session_channel.transport.interface import ChannelTransport
from session_channel.protocol.parser import parse_server_event
from session_channel.observers.severity import Severity
from session_channel.observers.messages import ChatMessage, utc_now
from session_channel.observers.conversation_log import ConversationLog
from session_channel.observers.notification_sink import NotificationSink
from session_channel.state.settings import ChannelSettings, TransportSettings
from session_channel.errors import ProtocolError, NotAuthenticatedError
from session_channel.config.transport import REASON_SERVER_DISCONNECT
from session_channel.config.protocol import (
    EVENT_PING,
    EVENT_CONNECT,
    INBOUND_EVENTS,
    OUTBOUND_EVENTS,
    EVENT_DISCONNECT,
    EVENT_END_SESSION,
    EVENT_AUTHENTICATE,
    EVENT_CHAT_MESSAGE,
    EVENT_CONNECT_ERROR,
    AGENT_STATUS_OFFLINE,
    EVENT_RECONNECT_FAILED,
)
from session_channel.config.notifications import (
    NOTICE_AUTH_SLOW,
    NOTICE_CONNECTED,
    NOTICE_CHAT_ERROR,
    AUTH_TIMEOUT_ERROR,
    NOTICE_AUTH_FAILED,
    NOTICE_NOT_CONNECTED,
    NOTICE_CONNECTION_ERROR,
    NOTICE_RECONNECT_FAILED,
)
from session_channel.protocol.events import (
    Pong,
    ChatError,
    AgentStatus,
    ChatResponse,
    ServerEvent,
    SessionEnded,
    Authenticated,
    SessionSummary,
    SessionRestored,
    TypingIndicator,
    MessageDelivered,
    SessionAnalytics,
    RateLimitExceeded,
    AuthenticationFailed,
)

from .keys import RequestKey
from .fanout import rate_limit_text, apply_chat_response
from .latency import LatencyProbe
from .debouncer import TypingDebouncer
from .correlator import RequestCorrelator

logger = logging.getLogger(__name__)

TransportFactory = Callable[[TransportSettings], ChannelTransport]

# Connection status strings written into the conversation log.
LOG_STATUS_CONNECTED = "connected"
LOG_STATUS_AUTHENTICATED = "authenticated"
LOG_STATUS_DISCONNECTED = "disconnected"
LOG_STATUS_ENDED = "ended"


class SessionChannel:
    """One persistent, authenticated chat session with the server."""

    def __init__(
        self,
        settings: ChannelSettings | None = None,
        *,
        conversation: ConversationLog,
        notifications: NotificationSink,
        transport_factory: TransportFactory | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or load_settings()
        self._conversation = conversation
        self._notifications = notifications
        self._transport_factory = transport_factory or ReconnectingTransport
        self._transport: ChannelTransport | None = None

        self._connected = False
        self._authenticated = False
        self._last_error: str | None = None
        self._reconnect_attempts = 0
        self._status = ChannelStatus.IDLE
        self.agent_status = AGENT_STATUS_OFFLINE

        self._correlator = RequestCorrelator()
        self._latency = LatencyProbe(clock)
        self._typing = TypingDebouncer(
            self.settings.session.typing_quiet_period_s,
            emit=self._emit,
            can_emit=lambda: self._authenticated,
        )
        self._auth_watchdog: asyncio.TimerHandle | None = None

        self._event_handlers: dict[type, Callable[[Any], None]] = {
            Authenticated: self._on_authenticated,
            AuthenticationFailed: self._on_authentication_failed,
            SessionRestored: self._on_session_restored,
            ChatResponse: self._on_chat_response,
            ChatError: self._on_chat_error,
            TypingIndicator: self._on_typing_indicator,
            MessageDelivered: self._on_message_delivered,
            SessionSummary: self._on_session_summary,
            SessionEnded: self._on_session_ended,
            SessionAnalytics: self._on_session_analytics,
            AgentStatus: self._on_agent_status,
            RateLimitExceeded: self._on_rate_limit_exceeded,
            Pong: self._on_pong,
        }

    # ----- observable state -----

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def status(self) -> ChannelStatus:
        return self._status

    @property
    def is_typing(self) -> bool:
        return self._typing.is_typing

    @property
    def latency_s(self) -> float | None:
        return self._latency.latency_s

    @property
    def last_ping_ts(self) -> float | None:
        return self._latency.last_ping_ts

    # ----- connection lifecycle -----

    def connect(self) -> None:
        current = self._transport
        if current is not None and current.connected:
            return
        if current is not None:
            # Replace a transport that is still retrying rather than leak it.
            current.remove_all_listeners()
            current.disconnect()

        transport = self._transport_factory(self.settings.transport)
        self._transport = transport
        self._register(transport)
        self._status = ChannelStatus.CONNECTING
        logger.info("connecting to %s", self.settings.transport.server_url)
        transport.connect()

    def _register(self, transport: ChannelTransport) -> None:
        transport.on(EVENT_CONNECT, self._on_connect)
        transport.on(EVENT_DISCONNECT, self._on_disconnect)
        transport.on(EVENT_CONNECT_ERROR, self._on_connect_error)
        transport.on(EVENT_RECONNECT_FAILED, self._on_reconnect_failed)
        transport.on_any(self._on_any)
        for name in INBOUND_EVENTS:
            transport.on(name, partial(self._on_server_event, name))

    def disconnect(self) -> None:
        transport, self._transport = self._transport, None
        was_connected = self._connected
        if transport is not None:
            # Listeners go first so the transport's own disconnect event is not observed.
            transport.remove_all_listeners()
            transport.disconnect()

        self._cancel_auth_watchdog()
        self._typing.reset()
        cancelled = self._correlator.cancel_all()
        if cancelled:
            logger.debug("cancelled %d outstanding requests", cancelled)
        self._connected = False
        self._authenticated = False
        self._status = ChannelStatus.DISCONNECTED
        if was_connected:
            self._conversation.set_connection_status(LOG_STATUS_DISCONNECTED)

    async def aclose(self) -> None:
        transport = self._transport
        self.disconnect()
        if transport is not None:
            await transport.aclose()

    # ----- outbound operations -----

    def _emit(self, name: str, payload: Any = None) -> None:
        if name not in OUTBOUND_EVENTS:
            raise ProtocolError(f"'{name}' is not an outbound channel event")
        transport = self._transport
        if transport is None:
            logger.debug("dropping '%s': no transport", name)
            return
        transport.emit(name, payload)

    def _transport_connected(self) -> bool:
        return self._transport is not None and self._transport.connected

    def send_message(self, text: str) -> None:
        if not (self._authenticated and self._transport_connected()):
            self._notifications.notify(Severity.WARNING, NOTICE_NOT_CONNECTED)
            return
        sent_at = utc_now()
        self._emit(EVENT_CHAT_MESSAGE, {"message": text, "timestamp": sent_at.isoformat()})
        self._conversation.append_message(ChatMessage(content=text, role="user", timestamp=sent_at))

    def _request(self, key: RequestKey, timeout_s: float | None) -> asyncio.Future:
        if not self._authenticated:
            future = asyncio.get_running_loop().create_future()
            future.set_exception(NotAuthenticatedError(key.request_event))
            # Mark retrieved so an unawaited future is not reported at collection.
            future.exception()
            return future
        if timeout_s is None:
            timeout_s = self.settings.session.request_timeout_s
        future = self._correlator.register(key, timeout_s)
        self._emit(key.request_event)
        return future

    def request_summary(self, timeout_s: float | None = None) -> asyncio.Future:
        """Ask for the session summary; the future resolves with the reply payload as received.

        ``timeout_s=None`` uses the configured request timeout, ``0`` waits indefinitely.
        """
        return self._request(RequestKey.SUMMARY, timeout_s)

    def request_analytics(self, timeout_s: float | None = None) -> asyncio.Future:
        return self._request(RequestKey.ANALYTICS, timeout_s)

    def start_typing(self) -> None:
        self._typing.start()

    def stop_typing(self) -> None:
        self._typing.stop()

    def on_user_typing(self) -> None:
        self._typing.touch()

    def end_session(self) -> None:
        if self._authenticated:
            self._emit(EVENT_END_SESSION)

    def ping(self) -> None:
        if not self._transport_connected():
            return
        self._latency.mark_sent()
        self._emit(EVENT_PING)

    # ----- handshake -----

    def _authenticate(self) -> None:
        session_id = self._conversation.current_session_id
        if not session_id:
            logger.info("connected without a session id; skipping authentication")
            return
        self._emit(EVENT_AUTHENTICATE, {"sessionId": session_id})
        self._arm_auth_watchdog()

    def _arm_auth_watchdog(self) -> None:
        self._cancel_auth_watchdog()
        timeout_s = self.settings.session.auth_timeout_s
        if timeout_s > 0:
            self._auth_watchdog = asyncio.get_running_loop().call_later(timeout_s, self._on_auth_timeout)

    def _cancel_auth_watchdog(self) -> None:
        if self._auth_watchdog is not None:
            self._auth_watchdog.cancel()
            self._auth_watchdog = None

    def _on_auth_timeout(self) -> None:
        self._auth_watchdog = None
        if not self._connected or self._authenticated:
            return
        logger.warning("no authentication reply after %.1fs", self.settings.session.auth_timeout_s)
        self._last_error = AUTH_TIMEOUT_ERROR
        self._notifications.notify(Severity.WARNING, NOTICE_AUTH_SLOW)

    # ----- transport lifecycle reactions -----

    def _on_connect(self) -> None:
        self._connected = True
        self._last_error = None
        self._reconnect_attempts = 0
        self._status = ChannelStatus.CONNECTED
        self._conversation.set_connection_status(LOG_STATUS_CONNECTED)
        logger.info("connected to chat server")
        self._authenticate()

    def _on_disconnect(self, reason: str) -> None:
        self._connected = False
        self._authenticated = False
        self._cancel_auth_watchdog()
        self._typing.reset()
        self._status = ChannelStatus.DISCONNECTED
        self._conversation.set_connection_status(LOG_STATUS_DISCONNECTED)
        logger.info("disconnected from chat server: %s", reason)
        if reason == REASON_SERVER_DISCONNECT and self._transport is not None:
            # The transport does not reconnect after a server-side close on its own.
            self._transport.connect()

    def _on_connect_error(self, error: Any) -> None:
        self._last_error = str(error)
        self._reconnect_attempts += 1
        logger.info("connection error (attempt %d): %s", self._reconnect_attempts, error)
        self._notifications.notify(Severity.ERROR, NOTICE_CONNECTION_ERROR.format(error=error))

    def _on_reconnect_failed(self, attempts: int) -> None:
        self._status = ChannelStatus.DISCONNECTED
        logger.warning("reconnection gave up after %s attempts", attempts)
        self._notifications.notify(Severity.ERROR, NOTICE_RECONNECT_FAILED.format(attempts=attempts))

    # ----- inbound server events -----

    def _on_any(self, name: str, payload: Any) -> None:
        if name not in INBOUND_EVENTS:
            logger.warning("dropping unknown server event '%s'", name)

    def _on_server_event(self, name: str, payload: Any) -> None:
        try:
            event: ServerEvent = parse_server_event(name, payload)
        except ProtocolError as exc:
            logger.warning("dropping malformed '%s' event: %s", name, exc)
            return
        self._event_handlers[type(event)](event)

    def _on_authenticated(self, event: Authenticated) -> None:
        self._cancel_auth_watchdog()
        self._authenticated = True
        self._status = ChannelStatus.AUTHENTICATED
        self._conversation.set_connection_status(LOG_STATUS_AUTHENTICATED)
        logger.info("authenticated session %s", event.session_id)
        self._notifications.notify(Severity.SUCCESS, NOTICE_CONNECTED)

    def _on_authentication_failed(self, event: AuthenticationFailed) -> None:
        self._cancel_auth_watchdog()
        self._authenticated = False
        logger.warning("authentication failed: %s", event.error)
        self._notifications.notify(Severity.ERROR, NOTICE_AUTH_FAILED.format(error=event.error))

    def _on_session_restored(self, event: SessionRestored) -> None:
        self._cancel_auth_watchdog()
        self._authenticated = True
        self._status = ChannelStatus.AUTHENTICATED
        self._conversation.set_connection_status(LOG_STATUS_AUTHENTICATED)
        if event.conversation_history is not None:
            self._conversation.restore_conversation(event.conversation_history)

    def _on_chat_response(self, event: ChatResponse) -> None:
        apply_chat_response(self._conversation, event)

    def _on_chat_error(self, event: ChatError) -> None:
        self._notifications.notify(Severity.ERROR, NOTICE_CHAT_ERROR.format(error=event.error))

    def _on_typing_indicator(self, event: TypingIndicator) -> None:
        self._conversation.update_typing_status(event.is_typing)

    def _on_message_delivered(self, event: MessageDelivered) -> None:
        self._conversation.mark_message_delivered(event.message_id)

    def _on_session_summary(self, event: SessionSummary) -> None:
        self._correlator.resolve(RequestKey.SUMMARY, event.data)

    def _on_session_analytics(self, event: SessionAnalytics) -> None:
        self._correlator.resolve(RequestKey.ANALYTICS, event.data)

    def _on_session_ended(self, event: SessionEnded) -> None:
        self._authenticated = False
        self._typing.reset()
        self._status = ChannelStatus.ENDED
        self._conversation.set_connection_status(LOG_STATUS_ENDED)
        logger.info("session ended: %s", event.session_id)

    def _on_agent_status(self, event: AgentStatus) -> None:
        self.agent_status = event.status

    def _on_rate_limit_exceeded(self, event: RateLimitExceeded) -> None:
        self._notifications.notify(Severity.WARNING, rate_limit_text(event))

    def _on_pong(self, event: Pong) -> None:
        latency = self._latency.record_pong()
        if latency is not None:
            logger.debug("latency %.1fms", latency * 1000.0)


__all__ = ["SessionChannel", "TransportFactory"]
