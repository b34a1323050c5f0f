"""Correlation keys for request/response pairs."""

from __future__ import annotations

from enum import Enum

from session_channel.config.protocol import (
    EVENT_SESSION_SUMMARY,
    EVENT_REQUEST_SUMMARY,
    EVENT_REQUEST_ANALYTICS,
    EVENT_SESSION_ANALYTICS,
)


class RequestKey(str, Enum):
    SUMMARY = "summary"
    ANALYTICS = "analytics"

    @property
    def request_event(self) -> str:
        return _REQUEST_EVENTS[self]

    @property
    def reply_event(self) -> str:
        return _REPLY_EVENTS[self]


_REQUEST_EVENTS = {RequestKey.SUMMARY: EVENT_REQUEST_SUMMARY, RequestKey.ANALYTICS: EVENT_REQUEST_ANALYTICS}
_REPLY_EVENTS = {RequestKey.SUMMARY: EVENT_SESSION_SUMMARY, RequestKey.ANALYTICS: EVENT_SESSION_ANALYTICS}

__all__ = ["RequestKey"]
