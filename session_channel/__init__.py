"""Client-side session channel for real-time chat."""

from .errors import (
    ProtocolError,
    TransportError,
    LinkClosedError,
    RequestTimeoutError,
    NotAuthenticatedError,
)
from .state import ChannelStatus, ChannelSettings, SessionSettings, TransportSettings
from .channel import RequestKey, SessionChannel
from .runtime import load_settings, configure_logging
from .observers import (
    Severity,
    ChatMessage,
    Notification,
    ConversationLog,
    NotificationSink,
    ConversationStore,
    NotificationCenter,
)
from .transport import ReconnectingTransport

__all__ = [
    "ChannelSettings",
    "ChannelStatus",
    "ChatMessage",
    "ConversationLog",
    "ConversationStore",
    "LinkClosedError",
    "Notification",
    "NotificationCenter",
    "NotificationSink",
    "NotAuthenticatedError",
    "ProtocolError",
    "ReconnectingTransport",
    "RequestKey",
    "RequestTimeoutError",
    "SessionChannel",
    "SessionSettings",
    "Severity",
    "TransportError",
    "TransportSettings",
    "configure_logging",
    "load_settings",
]
