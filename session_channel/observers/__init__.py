from .messages import ChatMessage, Notification
from .severity import Severity
from .conversation import ConversationStore
from .notifications import NotificationCenter
from .conversation_log import ConversationLog
from .notification_sink import NotificationSink

__all__ = [
    "ChatMessage",
    "ConversationLog",
    "ConversationStore",
    "Notification",
    "NotificationCenter",
    "NotificationSink",
    "Severity",
]
