"""Validation of inbound event payloads into typed server events.

Every inbound event name maps to exactly one parser. Payload keys follow the
server's camelCase wire format; optional keys default the way the server
omits them. Anything outside the vocabulary raises ``ProtocolError``.
"""

from __future__ import annotations

from typing import Any
from collections.abc import Callable

from session_channel.errors import ProtocolError
from session_channel.config.protocol import (
    EVENT_PONG,
    EVENT_CHAT_ERROR,
    EVENT_AGENT_STATUS,
    EVENT_AUTHENTICATED,
    EVENT_CHAT_RESPONSE,
    EVENT_SESSION_ENDED,
    EVENT_SESSION_SUMMARY,
    EVENT_SESSION_RESTORED,
    EVENT_TYPING_INDICATOR,
    EVENT_MESSAGE_DELIVERED,
    EVENT_SESSION_ANALYTICS,
    EVENT_RATE_LIMIT_EXCEEDED,
    EVENT_AUTHENTICATION_FAILED,
)

from .events import (
    Pong,
    ChatError,
    AgentStatus,
    ChatResponse,
    ServerEvent,
    SessionEnded,
    Authenticated,
    SessionSummary,
    SessionRestored,
    TypingIndicator,
    MessageDelivered,
    SessionAnalytics,
    RateLimitExceeded,
    AuthenticationFailed,
)

ParserFn = Callable[[dict[str, Any]], ServerEvent]


def _as_object(name: str, payload: Any) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ProtocolError(f"'{name}' payload must be an object")
    return payload


def _required_str(payload: dict[str, Any], key: str, name: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ProtocolError(f"'{name}' payload missing string '{key}'")
    return value


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _error_text(payload: dict[str, Any]) -> str:
    value = payload.get("error")
    if value is None:
        return "unknown error"
    return value if isinstance(value, str) else str(value)


def _number(value: Any, key: str, name: str) -> int | float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProtocolError(f"'{name}' payload '{key}' must be a number")
    return value


def _parse_authenticated(payload: dict[str, Any]) -> Authenticated:
    return Authenticated(success=bool(payload.get("success", True)), session_id=_optional_str(payload, "sessionId"))


def _parse_authentication_failed(payload: dict[str, Any]) -> AuthenticationFailed:
    return AuthenticationFailed(error=_error_text(payload))


def _parse_session_restored(payload: dict[str, Any]) -> SessionRestored:
    history = payload.get("conversationHistory")
    if history is None:
        return SessionRestored(conversation_history=None)
    if not isinstance(history, list) or not all(isinstance(item, dict) for item in history):
        raise ProtocolError(f"'{EVENT_SESSION_RESTORED}' conversationHistory must be a list of objects")
    return SessionRestored(conversation_history=history)


def _parse_chat_response(payload: dict[str, Any]) -> ChatResponse:
    message = _required_str(payload, "message", EVENT_CHAT_RESPONSE)
    quick_replies = payload.get("quickReplies")
    if quick_replies is not None:
        if not isinstance(quick_replies, list):
            raise ProtocolError(f"'{EVENT_CHAT_RESPONSE}' quickReplies must be a list")
        quick_replies = [str(item) for item in quick_replies]
    rate = _number(payload.get("completionRate"), "completionRate", EVENT_CHAT_RESPONSE)
    return ChatResponse(
        message=message,
        quick_replies=quick_replies,
        completion_rate=float(rate) if rate is not None else None,
        is_complete=bool(payload.get("isComplete", False)),
    )


def _parse_chat_error(payload: dict[str, Any]) -> ChatError:
    return ChatError(error=_error_text(payload), retry=bool(payload.get("retry", False)))


def _parse_typing_indicator(payload: dict[str, Any]) -> TypingIndicator:
    is_typing = payload.get("isTyping")
    if not isinstance(is_typing, bool):
        raise ProtocolError(f"'{EVENT_TYPING_INDICATOR}' payload missing boolean 'isTyping'")
    return TypingIndicator(is_typing=is_typing)


def _parse_message_delivered(payload: dict[str, Any]) -> MessageDelivered:
    message_id = payload.get("messageId")
    if message_id is None or isinstance(message_id, (dict, list)):
        raise ProtocolError(f"'{EVENT_MESSAGE_DELIVERED}' payload missing 'messageId'")
    return MessageDelivered(message_id=str(message_id))


def _parse_session_ended(payload: dict[str, Any]) -> SessionEnded:
    return SessionEnded(session_id=_optional_str(payload, "sessionId"))


def _parse_agent_status(payload: dict[str, Any]) -> AgentStatus:
    return AgentStatus(status=_required_str(payload, "status", EVENT_AGENT_STATUS))


def _parse_rate_limit_exceeded(payload: dict[str, Any]) -> RateLimitExceeded:
    return RateLimitExceeded(
        error=_error_text(payload),
        retry_after=_number(payload.get("retryAfter"), "retryAfter", EVENT_RATE_LIMIT_EXCEEDED),
    )


def _parse_pong(payload: dict[str, Any]) -> Pong:
    return Pong(timestamp=payload.get("timestamp"))


PARSERS: dict[str, ParserFn] = {
    EVENT_AUTHENTICATED: _parse_authenticated,
    EVENT_AUTHENTICATION_FAILED: _parse_authentication_failed,
    EVENT_SESSION_RESTORED: _parse_session_restored,
    EVENT_CHAT_RESPONSE: _parse_chat_response,
    EVENT_CHAT_ERROR: _parse_chat_error,
    EVENT_TYPING_INDICATOR: _parse_typing_indicator,
    EVENT_MESSAGE_DELIVERED: _parse_message_delivered,
    EVENT_SESSION_ENDED: _parse_session_ended,
    EVENT_AGENT_STATUS: _parse_agent_status,
    EVENT_RATE_LIMIT_EXCEEDED: _parse_rate_limit_exceeded,
    EVENT_PONG: _parse_pong,
}


def parse_server_event(name: str, payload: Any) -> ServerEvent:
    # Summary and analytics payloads are opaque to the client and resolve waiters as-is.
    if name == EVENT_SESSION_SUMMARY:
        return SessionSummary(data=payload)
    if name == EVENT_SESSION_ANALYTICS:
        return SessionAnalytics(data=payload)

    parser = PARSERS.get(name)
    if parser is None:
        raise ProtocolError(f"event '{name}' is not part of the channel vocabulary")
    return parser(_as_object(name, payload))


__all__ = ["PARSERS", "parse_server_event"]
