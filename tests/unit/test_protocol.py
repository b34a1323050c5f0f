from __future__ import annotations

import orjson
import pytest

from session_channel.errors import ProtocolError
from session_channel.protocol.parser import PARSERS, parse_server_event
from session_channel.config.protocol import INBOUND_EVENTS, EVENT_SESSION_SUMMARY, EVENT_SESSION_ANALYTICS
from session_channel.protocol.envelope import decode_envelope, encode_envelope
from session_channel.protocol.events import (
    Pong,
    ChatResponse,
    Authenticated,
    SessionSummary,
    SessionRestored,
    MessageDelivered,
    RateLimitExceeded,
)


def test_encode_envelope_shape() -> None:
    raw = encode_envelope("authenticate", {"sessionId": "s-1"})
    assert orjson.loads(raw) == {"type": "authenticate", "payload": {"sessionId": "s-1"}}
    assert orjson.loads(encode_envelope("ping")) == {"type": "ping", "payload": None}


def test_decode_envelope_ok() -> None:
    name, payload = decode_envelope(b'{"type": "pong", "payload": {"timestamp": 5}}')
    assert name == "pong"
    assert payload == {"timestamp": 5}


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '{"payload": {}}',
        '{"type": "", "payload": {}}',
        '{"type": 3}',
    ],
)
def test_decode_envelope_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        decode_envelope(raw)


def test_every_inbound_event_has_a_parser() -> None:
    assert set(PARSERS) | {EVENT_SESSION_SUMMARY, EVENT_SESSION_ANALYTICS} == INBOUND_EVENTS


def test_parse_chat_response() -> None:
    event = parse_server_event(
        "chat_response",
        {"message": "Hi", "quickReplies": ["a", "b"], "completionRate": 55, "isComplete": False},
    )
    assert event == ChatResponse(message="Hi", quick_replies=["a", "b"], completion_rate=55.0, is_complete=False)


def test_parse_authenticated_defaults() -> None:
    assert parse_server_event("authenticated", None) == Authenticated(success=True, session_id=None)


def test_summary_payload_is_passed_through_untouched() -> None:
    payload = {"anything": [1, 2, 3]}
    event = parse_server_event("session_summary", payload)
    assert isinstance(event, SessionSummary)
    assert event.data is payload


def test_parse_rate_limit_keeps_numeric_type() -> None:
    assert parse_server_event("rate_limit_exceeded", {"error": "x", "retryAfter": 60}).retry_after == 60
    assert parse_server_event("rate_limit_exceeded", {"retryAfter": 1.5}) == RateLimitExceeded(
        error="unknown error", retry_after=1.5
    )


def test_parse_misc_events() -> None:
    assert parse_server_event("message_delivered", {"messageId": 42}) == MessageDelivered(message_id="42")
    assert parse_server_event("pong", {}) == Pong(timestamp=None)
    assert parse_server_event("session_restored", {}) == SessionRestored(conversation_history=None)


@pytest.mark.parametrize(
    ("name", "payload"),
    [
        ("no_such_event", {}),
        ("chat_response", {}),
        ("chat_response", "text"),
        ("chat_response", {"message": "x", "quickReplies": "a"}),
        ("typing_indicator", {"isTyping": "yes"}),
        ("rate_limit_exceeded", {"retryAfter": True}),
        ("rate_limit_exceeded", {"retryAfter": "60"}),
        ("message_delivered", {}),
        ("agent_status", {}),
        ("session_restored", {"conversationHistory": ["x"]}),
    ],
)
def test_parse_server_event_rejects(name: str, payload) -> None:
    with pytest.raises(ProtocolError):
        parse_server_event(name, payload)
