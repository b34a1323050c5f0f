"""User-facing notification texts emitted by the session channel."""

from __future__ import annotations

NOTICE_CONNECTED = "Connected to chat server"
NOTICE_NOT_CONNECTED = "Not connected to chat server"
NOTICE_AUTH_FAILED = "Authentication failed: {error}"
NOTICE_AUTH_SLOW = "Authentication is taking longer than expected"
NOTICE_CONNECTION_ERROR = "Connection error: {error}"
NOTICE_RECONNECT_FAILED = "Unable to reach chat server after {attempts} attempts"
NOTICE_CHAT_ERROR = "Chat error: {error}"
NOTICE_RATE_LIMITED = "Too many messages. Please wait {retry_after} seconds before sending another message."
NOTICE_RATE_LIMITED_NO_DELAY = "Too many messages. Please wait before sending another message."

# `last_error` value set by the handshake watchdog.
AUTH_TIMEOUT_ERROR = "authentication timed out"

__all__ = [
    "AUTH_TIMEOUT_ERROR",
    "NOTICE_AUTH_FAILED",
    "NOTICE_AUTH_SLOW",
    "NOTICE_CHAT_ERROR",
    "NOTICE_CONNECTED",
    "NOTICE_CONNECTION_ERROR",
    "NOTICE_NOT_CONNECTED",
    "NOTICE_RATE_LIMITED",
    "NOTICE_RATE_LIMITED_NO_DELAY",
    "NOTICE_RECONNECT_FAILED",
]
