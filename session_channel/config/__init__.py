"""Configuration module exports (env names and defaults only)."""

from .session import (
    DEFAULT_CHAT_AUTH_TIMEOUT_S,
    DEFAULT_CHAT_REQUEST_TIMEOUT_S,
    DEFAULT_CHAT_TYPING_QUIET_PERIOD_S,
)
from .transport import (
    DEFAULT_CHAT_SERVER_URL,
    DEFAULT_CHAT_TRANSPORTS,
    REASON_SERVER_DISCONNECT,
)

__all__ = [
    "DEFAULT_CHAT_AUTH_TIMEOUT_S",
    "DEFAULT_CHAT_REQUEST_TIMEOUT_S",
    "DEFAULT_CHAT_SERVER_URL",
    "DEFAULT_CHAT_TRANSPORTS",
    "DEFAULT_CHAT_TYPING_QUIET_PERIOD_S",
    "REASON_SERVER_DISCONNECT",
]
