"""Translation of chat events into conversation and notification updates."""

from __future__ import annotations

from session_channel.observers.messages import ChatMessage
from session_channel.protocol.events import ChatResponse, RateLimitExceeded
from session_channel.observers.conversation_log import ConversationLog
from session_channel.config.notifications import NOTICE_RATE_LIMITED, NOTICE_RATE_LIMITED_NO_DELAY


def apply_chat_response(conversation: ConversationLog, event: ChatResponse) -> ChatMessage:
    message = ChatMessage(content=event.message, role="assistant", quick_replies=event.quick_replies)
    conversation.append_message(message)
    if event.completion_rate is not None:
        conversation.update_completion_rate(event.completion_rate)
    if event.is_complete:
        conversation.mark_session_complete()
    return message


def _seconds_text(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def rate_limit_text(event: RateLimitExceeded) -> str:
    if event.retry_after is None:
        return NOTICE_RATE_LIMITED_NO_DELAY
    return NOTICE_RATE_LIMITED.format(retry_after=_seconds_text(event.retry_after))


__all__ = ["apply_chat_response", "rate_limit_text"]
