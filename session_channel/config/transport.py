"""Transport and reconnection policy configuration (env names and defaults)."""

from __future__ import annotations

# Environment variable names
ENV_CHAT_SERVER_URL = "CHAT_SERVER_URL"
ENV_CHAT_WS_PATH = "CHAT_WS_PATH"
ENV_CHAT_POLL_PATH = "CHAT_POLL_PATH"
ENV_CHAT_RECONNECTION = "CHAT_RECONNECTION"
ENV_CHAT_RECONNECTION_ATTEMPTS = "CHAT_RECONNECTION_ATTEMPTS"
ENV_CHAT_RECONNECTION_DELAY_S = "CHAT_RECONNECTION_DELAY_S"
ENV_CHAT_RECONNECTION_DELAY_MAX_S = "CHAT_RECONNECTION_DELAY_MAX_S"
ENV_CHAT_RECONNECTION_JITTER = "CHAT_RECONNECTION_JITTER"
ENV_CHAT_CONNECT_TIMEOUT_S = "CHAT_CONNECT_TIMEOUT_S"
ENV_CHAT_TRANSPORTS = "CHAT_TRANSPORTS"

# Defaults
DEFAULT_CHAT_SERVER_URL = "http://localhost:3000"
DEFAULT_CHAT_WS_PATH = "/ws"
DEFAULT_CHAT_POLL_PATH = "/poll"
DEFAULT_CHAT_RECONNECTION = True
DEFAULT_CHAT_RECONNECTION_ATTEMPTS = 5
DEFAULT_CHAT_RECONNECTION_DELAY_S = 1.0
DEFAULT_CHAT_RECONNECTION_DELAY_MAX_S = 5.0
DEFAULT_CHAT_RECONNECTION_JITTER = 0.5
DEFAULT_CHAT_CONNECT_TIMEOUT_S = 20.0
DEFAULT_CHAT_TRANSPORTS = ("websocket", "polling")

# Mechanism names
TRANSPORT_WEBSOCKET = "websocket"
TRANSPORT_POLLING = "polling"
KNOWN_TRANSPORTS = frozenset({TRANSPORT_WEBSOCKET, TRANSPORT_POLLING})

# Backoff growth factor between reconnection attempts
RECONNECTION_BACKOFF_FACTOR = 2.0

# Disconnect reasons surfaced to `disconnect` listeners
REASON_SERVER_DISCONNECT = "io server disconnect"
REASON_CLIENT_DISCONNECT = "io client disconnect"
REASON_TRANSPORT_CLOSE = "transport close"
REASON_TRANSPORT_ERROR = "transport error"
REASON_PING_TIMEOUT = "ping timeout"

# WebSocket close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_INTERNAL_ERROR_CODE = 1011

# WebSocket keepalive (protocol-level ping frames, separate from the app `ping` event)
WS_PING_INTERVAL_S: float | None = 20.0
WS_PING_TIMEOUT_S: float | None = 20.0
WS_MAX_MESSAGE_BYTES: int = 1024 * 1024

# Long-polling fallback
POLL_WAIT_S = 25.0
POLL_GONE_STATUS_CODES = frozenset({404, 410})
POLL_KEY_SID = "sid"
POLL_KEY_FRAMES = "frames"
POLL_KEY_CLOSED = "closed"

__all__ = [
    "DEFAULT_CHAT_CONNECT_TIMEOUT_S",
    "DEFAULT_CHAT_POLL_PATH",
    "DEFAULT_CHAT_RECONNECTION",
    "DEFAULT_CHAT_RECONNECTION_ATTEMPTS",
    "DEFAULT_CHAT_RECONNECTION_DELAY_MAX_S",
    "DEFAULT_CHAT_RECONNECTION_DELAY_S",
    "DEFAULT_CHAT_RECONNECTION_JITTER",
    "DEFAULT_CHAT_SERVER_URL",
    "DEFAULT_CHAT_TRANSPORTS",
    "DEFAULT_CHAT_WS_PATH",
    "ENV_CHAT_CONNECT_TIMEOUT_S",
    "ENV_CHAT_POLL_PATH",
    "ENV_CHAT_RECONNECTION",
    "ENV_CHAT_RECONNECTION_ATTEMPTS",
    "ENV_CHAT_RECONNECTION_DELAY_MAX_S",
    "ENV_CHAT_RECONNECTION_DELAY_S",
    "ENV_CHAT_RECONNECTION_JITTER",
    "ENV_CHAT_SERVER_URL",
    "ENV_CHAT_TRANSPORTS",
    "ENV_CHAT_WS_PATH",
    "KNOWN_TRANSPORTS",
    "POLL_GONE_STATUS_CODES",
    "POLL_KEY_CLOSED",
    "POLL_KEY_FRAMES",
    "POLL_KEY_SID",
    "POLL_WAIT_S",
    "REASON_CLIENT_DISCONNECT",
    "REASON_PING_TIMEOUT",
    "REASON_SERVER_DISCONNECT",
    "REASON_TRANSPORT_CLOSE",
    "REASON_TRANSPORT_ERROR",
    "RECONNECTION_BACKOFF_FACTOR",
    "TRANSPORT_POLLING",
    "TRANSPORT_WEBSOCKET",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_MAX_MESSAGE_BYTES",
    "WS_PING_INTERVAL_S",
    "WS_PING_TIMEOUT_S",
]
