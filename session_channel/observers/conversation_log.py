"""Interface of the conversation state a session channel writes into."""

from __future__ import annotations

from typing import Any, Protocol

from .messages import ChatMessage


class ConversationLog(Protocol):
    @property
    def current_session_id(self) -> str | None: ...

    def set_connection_status(self, status: str) -> None: ...
    def append_message(self, message: ChatMessage) -> None: ...
    def restore_conversation(self, history: list[dict[str, Any]]) -> None: ...
    def update_completion_rate(self, rate: float) -> None: ...
    def mark_session_complete(self) -> None: ...
    def update_typing_status(self, is_typing: bool) -> None: ...
    def mark_message_delivered(self, message_id: str) -> None: ...


__all__ = ["ConversationLog"]
