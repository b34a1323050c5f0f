"""Typed inbound events: one frozen dataclass per server event name."""

from __future__ import annotations

from typing import Any, Union
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Authenticated:
    success: bool
    session_id: str | None


@dataclass(frozen=True, slots=True)
class AuthenticationFailed:
    error: str


@dataclass(frozen=True, slots=True)
class SessionRestored:
    conversation_history: list[dict[str, Any]] | None


@dataclass(frozen=True, slots=True)
class ChatResponse:
    message: str
    quick_replies: list[str] | None = None
    completion_rate: float | None = None
    is_complete: bool = False


@dataclass(frozen=True, slots=True)
class ChatError:
    error: str
    retry: bool = False


@dataclass(frozen=True, slots=True)
class TypingIndicator:
    is_typing: bool


@dataclass(frozen=True, slots=True)
class MessageDelivered:
    message_id: str


@dataclass(frozen=True, slots=True)
class SessionSummary:
    data: Any


@dataclass(frozen=True, slots=True)
class SessionEnded:
    session_id: str | None


@dataclass(frozen=True, slots=True)
class SessionAnalytics:
    data: Any


@dataclass(frozen=True, slots=True)
class AgentStatus:
    status: str


@dataclass(frozen=True, slots=True)
class RateLimitExceeded:
    error: str
    retry_after: int | float | None


@dataclass(frozen=True, slots=True)
class Pong:
    timestamp: Any = None


ServerEvent = Union[
    Authenticated,
    AuthenticationFailed,
    SessionRestored,
    ChatResponse,
    ChatError,
    TypingIndicator,
    MessageDelivered,
    SessionSummary,
    SessionEnded,
    SessionAnalytics,
    AgentStatus,
    RateLimitExceeded,
    Pong,
]

__all__ = [
    "AgentStatus",
    "Authenticated",
    "AuthenticationFailed",
    "ChatError",
    "ChatResponse",
    "MessageDelivered",
    "Pong",
    "RateLimitExceeded",
    "ServerEvent",
    "SessionAnalytics",
    "SessionEnded",
    "SessionRestored",
    "SessionSummary",
    "TypingIndicator",
]
