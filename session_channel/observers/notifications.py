"""In-memory notification center."""

from __future__ import annotations

import logging

from session_channel.config.session import NOTIFICATION_DEFAULT_DURATION_S

from .messages import Notification
from .severity import Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
}


class NotificationCenter:
    """Ordered notification records; satisfies ``NotificationSink``."""

    def __init__(self, *, default_duration_s: float = NOTIFICATION_DEFAULT_DURATION_S) -> None:
        self._default_duration_s = default_duration_s
        self.notifications: list[Notification] = []

    def notify(self, severity: Severity, message: str, *, duration_s: float | None = None) -> Notification:
        severity = Severity(severity)
        notification = Notification(
            message=message,
            severity=severity,
            duration_s=self._default_duration_s if duration_s is None else duration_s,
        )
        self.notifications.append(notification)
        logger.log(_LOG_LEVELS[severity], "%s", message)
        return notification

    def show_success(self, message: str, **kwargs) -> Notification:
        return self.notify(Severity.SUCCESS, message, **kwargs)

    def show_error(self, message: str, **kwargs) -> Notification:
        return self.notify(Severity.ERROR, message, **kwargs)

    def show_warning(self, message: str, **kwargs) -> Notification:
        return self.notify(Severity.WARNING, message, **kwargs)

    def show_info(self, message: str, **kwargs) -> Notification:
        return self.notify(Severity.INFO, message, **kwargs)

    def remove(self, notification_id: str) -> bool:
        for idx, notification in enumerate(self.notifications):
            if notification.id == notification_id:
                del self.notifications[idx]
                return True
        return False

    def clear(self) -> None:
        self.notifications.clear()


__all__ = ["NotificationCenter"]
