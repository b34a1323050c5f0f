"""Records held by the conversation and notification stores."""

from __future__ import annotations

import uuid
from typing import Any, Literal
from datetime import datetime, timezone
from dataclasses import field, dataclass

from session_channel.config.session import NOTIFICATION_DEFAULT_DURATION_S

from .severity import Severity

Role = Literal["user", "assistant", "system"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _parse_timestamp(raw: Any) -> datetime:
    # History entries carry ISO-8601 strings; anything else is stamped now.
    if not isinstance(raw, str):
        return utc_now()
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return utc_now()


@dataclass(slots=True)
class ChatMessage:
    content: str
    role: Role
    timestamp: datetime = field(default_factory=utc_now)
    quick_replies: list[str] | None = None
    id: str = field(default_factory=_new_id)
    delivered: bool = False

    @classmethod
    def from_history(cls, entry: dict[str, Any]) -> ChatMessage:
        """Build a message from one entry of a restored conversation history.

        Accepts the server's camelCase keys; unknown roles are kept as ``system``.
        """
        role = entry.get("role")
        if role not in ("user", "assistant", "system"):
            role = "system"
        quick_replies = entry.get("quickReplies")
        message_id = entry.get("id")
        return cls(
            content=str(entry.get("content") or entry.get("message") or ""),
            role=role,
            timestamp=_parse_timestamp(entry.get("timestamp")),
            quick_replies=list(quick_replies) if isinstance(quick_replies, list) else None,
            id=str(message_id) if message_id is not None else _new_id(),
            delivered=bool(entry.get("delivered", True)),
        )


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    severity: Severity
    duration_s: float = NOTIFICATION_DEFAULT_DURATION_S
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=utc_now)


__all__ = ["ChatMessage", "Notification", "Role", "utc_now"]
