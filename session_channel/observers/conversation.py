"""In-memory conversation store."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from session_channel.config.session import COMPLETION_THRESHOLD_PCT

from .messages import ChatMessage

logger = logging.getLogger(__name__)

StoreListener = Callable[["ConversationStore"], None]


class ConversationStore:
    """Conversation state for one chat session.

    Satisfies ``ConversationLog``. Listeners registered with ``subscribe`` are
    called after every mutation with the store itself.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self._session_id = session_id
        self._listeners: list[StoreListener] = []
        self.messages: list[ChatMessage] = []
        self.connection_status = "disconnected"
        self.completion_rate = 0.0
        self.is_complete = False
        self.agent_typing = False
        self.quick_replies: list[str] = []

    @property
    def current_session_id(self) -> str | None:
        return self._session_id

    def set_session_id(self, session_id: str | None) -> None:
        self._session_id = session_id
        self._changed()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("conversation listener failed")

    def set_connection_status(self, status: str) -> None:
        self.connection_status = status
        self._changed()

    def append_message(self, message: ChatMessage) -> None:
        self.messages.append(message)
        if message.role == "assistant":
            self.quick_replies = list(message.quick_replies or [])
            self.agent_typing = False
        self._changed()

    def restore_conversation(self, history: list[dict[str, Any]]) -> None:
        self.messages = [ChatMessage.from_history(entry) for entry in history if isinstance(entry, dict)]
        last_assistant = next((m for m in reversed(self.messages) if m.role == "assistant"), None)
        self.quick_replies = list(last_assistant.quick_replies or []) if last_assistant else []
        logger.info("restored %d messages", len(self.messages))
        self._changed()

    def update_completion_rate(self, rate: float) -> None:
        self.completion_rate = max(0.0, min(100.0, float(rate)))
        if self.completion_rate >= COMPLETION_THRESHOLD_PCT:
            self.is_complete = True
        self._changed()

    def mark_session_complete(self) -> None:
        self.is_complete = True
        self._changed()

    def update_typing_status(self, is_typing: bool) -> None:
        self.agent_typing = bool(is_typing)
        self._changed()

    def mark_message_delivered(self, message_id: str) -> None:
        for message in self.messages:
            if message.id == message_id:
                message.delivered = True
                self._changed()
                return
        logger.debug("delivery receipt for unknown message %s", message_id)

    def reset(self) -> None:
        self.messages = []
        self.connection_status = "disconnected"
        self.completion_rate = 0.0
        self.is_complete = False
        self.agent_typing = False
        self.quick_replies = []
        self._changed()


__all__ = ["ConversationStore", "StoreListener"]
