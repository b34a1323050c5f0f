"""Terminal rendering for the interactive chat client.

Colors are applied only when stdout is a TTY.
"""

from __future__ import annotations

import sys
from typing import Any

import orjson

from session_channel.observers.severity import Severity
from session_channel.observers.messages import Notification
from session_channel.observers.conversation import ConversationStore
from session_channel.observers.notifications import NotificationCenter

_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def dim(text: str) -> str:
    return _c("2", text)


def bold(text: str) -> str:
    return _c("1", text)


def section_header(title: str, width: int = 60) -> str:
    padding = width - len(title) - 4
    left = padding // 2
    right = padding - left
    return bold(f"{'─' * left}[ {title} ]{'─' * right}")


_SEVERITY_COLORS = {
    Severity.ERROR: "31",
    Severity.WARNING: "33",
    Severity.SUCCESS: "32",
    Severity.INFO: "36",
}


def format_notification(notification: Notification) -> str:
    label = _c(_SEVERITY_COLORS[notification.severity], f"[{notification.severity.value}]")
    return f"{label} {notification.message}"


def format_payload(title: str, payload: Any) -> str:
    body = orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode("utf-8")
    return f"{section_header(title)}\n{body}"


class ConsoleNotifications(NotificationCenter):
    """Notification center that also prints each notification."""

    def notify(self, severity: Severity, message: str, *, duration_s: float | None = None) -> Notification:
        notification = super().notify(severity, message, duration_s=duration_s)
        print(format_notification(notification))
        return notification


class TranscriptPrinter:
    """Store listener that prints assistant replies as they arrive."""

    def __init__(self) -> None:
        self._printed = 0
        self._agent_typing = False

    def __call__(self, store: ConversationStore) -> None:
        if len(store.messages) < self._printed:
            # Conversation was restored or reset; print it from the start.
            self._printed = 0
        for message in store.messages[self._printed :]:
            if message.role != "user":
                print(f"{bold(message.role)}: {message.content}")
                if message.quick_replies:
                    print(dim("  quick replies: " + " | ".join(message.quick_replies)))
        self._printed = len(store.messages)
        if store.agent_typing and not self._agent_typing:
            print(dim("  agent is typing..."))
        self._agent_typing = store.agent_typing


__all__ = ["ConsoleNotifications", "TranscriptPrinter", "dim", "format_notification", "format_payload", "section_header"]
