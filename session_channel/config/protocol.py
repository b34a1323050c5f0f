"""Channel protocol vocabulary: envelope keys and event names."""

from __future__ import annotations

# Envelope keys
KEY_TYPE = "type"
KEY_PAYLOAD = "payload"

# Transport lifecycle events (produced locally, never on the wire)
EVENT_CONNECT = "connect"
EVENT_DISCONNECT = "disconnect"
EVENT_CONNECT_ERROR = "connect_error"
EVENT_RECONNECT_FAILED = "reconnect_failed"

# Inbound (server -> client)
EVENT_AUTHENTICATED = "authenticated"
EVENT_AUTHENTICATION_FAILED = "authentication_failed"
EVENT_SESSION_RESTORED = "session_restored"
EVENT_CHAT_RESPONSE = "chat_response"
EVENT_CHAT_ERROR = "chat_error"
EVENT_TYPING_INDICATOR = "typing_indicator"
EVENT_MESSAGE_DELIVERED = "message_delivered"
EVENT_SESSION_SUMMARY = "session_summary"
EVENT_SESSION_ENDED = "session_ended"
EVENT_SESSION_ANALYTICS = "session_analytics"
EVENT_AGENT_STATUS = "agent_status"
EVENT_RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
EVENT_PONG = "pong"

# Outbound (client -> server)
EVENT_AUTHENTICATE = "authenticate"
EVENT_CHAT_MESSAGE = "chat_message"
EVENT_TYPING_START = "typing_start"
EVENT_TYPING_STOP = "typing_stop"
EVENT_REQUEST_SUMMARY = "request_summary"
EVENT_REQUEST_ANALYTICS = "request_analytics"
EVENT_END_SESSION = "end_session"
EVENT_PING = "ping"

LIFECYCLE_EVENTS = frozenset({EVENT_CONNECT, EVENT_DISCONNECT, EVENT_CONNECT_ERROR, EVENT_RECONNECT_FAILED})

INBOUND_EVENTS = frozenset(
    {
        EVENT_AUTHENTICATED,
        EVENT_AUTHENTICATION_FAILED,
        EVENT_SESSION_RESTORED,
        EVENT_CHAT_RESPONSE,
        EVENT_CHAT_ERROR,
        EVENT_TYPING_INDICATOR,
        EVENT_MESSAGE_DELIVERED,
        EVENT_SESSION_SUMMARY,
        EVENT_SESSION_ENDED,
        EVENT_SESSION_ANALYTICS,
        EVENT_AGENT_STATUS,
        EVENT_RATE_LIMIT_EXCEEDED,
        EVENT_PONG,
    }
)

OUTBOUND_EVENTS = frozenset(
    {
        EVENT_AUTHENTICATE,
        EVENT_CHAT_MESSAGE,
        EVENT_TYPING_START,
        EVENT_TYPING_STOP,
        EVENT_REQUEST_SUMMARY,
        EVENT_REQUEST_ANALYTICS,
        EVENT_END_SESSION,
        EVENT_PING,
    }
)

# Agent status before the server reports one.
AGENT_STATUS_OFFLINE = "offline"

__all__ = [
    "AGENT_STATUS_OFFLINE",
    "EVENT_AGENT_STATUS",
    "EVENT_AUTHENTICATE",
    "EVENT_AUTHENTICATED",
    "EVENT_AUTHENTICATION_FAILED",
    "EVENT_CHAT_ERROR",
    "EVENT_CHAT_MESSAGE",
    "EVENT_CHAT_RESPONSE",
    "EVENT_CONNECT",
    "EVENT_CONNECT_ERROR",
    "EVENT_DISCONNECT",
    "EVENT_END_SESSION",
    "EVENT_MESSAGE_DELIVERED",
    "EVENT_PING",
    "EVENT_PONG",
    "EVENT_RATE_LIMIT_EXCEEDED",
    "EVENT_RECONNECT_FAILED",
    "EVENT_REQUEST_ANALYTICS",
    "EVENT_REQUEST_SUMMARY",
    "EVENT_SESSION_ANALYTICS",
    "EVENT_SESSION_ENDED",
    "EVENT_SESSION_RESTORED",
    "EVENT_SESSION_SUMMARY",
    "EVENT_TYPING_INDICATOR",
    "EVENT_TYPING_START",
    "EVENT_TYPING_STOP",
    "INBOUND_EVENTS",
    "KEY_PAYLOAD",
    "KEY_TYPE",
    "LIFECYCLE_EVENTS",
    "OUTBOUND_EVENTS",
]
