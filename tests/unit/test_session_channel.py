from __future__ import annotations

import gc
import asyncio
from datetime import datetime

import pytest

from session_channel.state.status import ChannelStatus
from session_channel.channel.session import SessionChannel
from session_channel.observers.severity import Severity
from session_channel.errors import RequestTimeoutError, NotAuthenticatedError
from session_channel.config.transport import REASON_TRANSPORT_CLOSE, REASON_SERVER_DISCONNECT
from utils.fakes import TransportFactory, RecordingConversation, RecordingNotifications, make_settings


def _channel(session_id: str | None = "s-1", **session_overrides):
    factory = TransportFactory()
    conversation = RecordingConversation(session_id)
    notifications = RecordingNotifications()
    channel = SessionChannel(
        make_settings(**session_overrides),
        conversation=conversation,
        notifications=notifications,
        transport_factory=factory,
    )
    return channel, factory, conversation, notifications


def _authenticated(**session_overrides):
    channel, factory, conversation, notifications = _channel(**session_overrides)
    channel.connect()
    factory.last.open()
    factory.last.server("authenticated", {"success": True, "sessionId": "s-1"})
    factory.last.emitted.clear()
    return channel, factory.last, conversation, notifications


@pytest.mark.asyncio
async def test_handshake_authenticates_with_session_id() -> None:
    channel, factory, conversation, notifications = _channel()

    channel.connect()
    transport = factory.last
    assert transport.connect_calls == 1
    assert channel.status is ChannelStatus.CONNECTING

    transport.open()
    assert transport.emitted == [("authenticate", {"sessionId": "s-1"})]
    assert channel.connected is True
    assert channel.authenticated is False
    assert channel.status is ChannelStatus.CONNECTED

    transport.server("authenticated", {"success": True, "sessionId": "s-1"})
    assert channel.authenticated is True
    assert channel.status is ChannelStatus.AUTHENTICATED
    assert conversation.statuses == ["connected", "authenticated"]
    assert notifications.items == [(Severity.SUCCESS, "Connected to chat server")]


@pytest.mark.asyncio
async def test_connect_without_session_id_sends_nothing() -> None:
    channel, factory, _, _ = _channel(session_id=None)
    channel.connect()
    factory.last.open()

    assert factory.last.emitted == []
    assert channel.connected is True


@pytest.mark.asyncio
async def test_connect_is_idempotent_while_connected() -> None:
    channel, factory, _, _ = _channel()
    channel.connect()
    factory.last.open()
    channel.connect()

    assert len(factory.created) == 1
    assert factory.last.connect_calls == 1


@pytest.mark.asyncio
async def test_connect_replaces_transport_that_is_still_retrying() -> None:
    channel, factory, _, _ = _channel()
    channel.connect()
    first = factory.last
    channel.connect()

    assert len(factory.created) == 2
    assert first.disconnect_calls == 1
    assert first.listener_count() == 0


@pytest.mark.asyncio
async def test_request_summary_resolves_with_reply_payload() -> None:
    channel, transport, _, _ = _authenticated()
    payload = {"summary": "lead qualified", "score": 7}

    future = channel.request_summary()
    assert transport.emitted == [("request_summary", None)]
    assert not future.done()

    transport.server("session_summary", payload)
    assert future.result() is payload


@pytest.mark.asyncio
async def test_request_analytics_resolves_with_reply_payload() -> None:
    channel, transport, _, _ = _authenticated()
    payload = {"messages": 12}

    future = channel.request_analytics()
    transport.server("session_analytics", payload)

    assert transport.emitted == [("request_analytics", None)]
    assert await future is payload


@pytest.mark.asyncio
async def test_overlapping_requests_resolve_in_order() -> None:
    channel, transport, _, _ = _authenticated()
    first = channel.request_summary()
    second = channel.request_summary()

    transport.server("session_summary", {"n": 1})
    assert first.result() == {"n": 1}
    assert not second.done()

    transport.server("session_summary", {"n": 2})
    assert second.result() == {"n": 2}


@pytest.mark.asyncio
async def test_request_before_authentication_fails_immediately() -> None:
    channel, factory, _, _ = _channel()
    channel.connect()
    factory.last.open()
    factory.last.emitted.clear()

    future = channel.request_summary()
    assert future.done()
    with pytest.raises(NotAuthenticatedError):
        future.result()
    assert factory.last.emitted == []


@pytest.mark.asyncio
async def test_request_times_out() -> None:
    channel, _, _, _ = _authenticated(request_timeout_s=0.02)
    future = channel.request_analytics()

    with pytest.raises(RequestTimeoutError) as exc:
        await asyncio.wait_for(future, timeout=1.0)
    assert exc.value.key == "analytics"


@pytest.mark.asyncio
async def test_disconnect_cancels_outstanding_requests() -> None:
    channel, _, _, _ = _authenticated()
    future = channel.request_summary()

    channel.disconnect()
    assert future.cancelled()


@pytest.mark.asyncio
async def test_transport_disconnect_keeps_outstanding_requests() -> None:
    channel, transport, _, _ = _authenticated()
    future = channel.request_summary()

    transport.drop(REASON_TRANSPORT_CLOSE)
    assert not future.done()


@pytest.mark.asyncio
async def test_rate_limit_warning_text() -> None:
    channel, transport, _, notifications = _authenticated()
    notifications.items.clear()

    transport.server("rate_limit_exceeded", {"error": "slow down", "retryAfter": 60})

    assert notifications.items == [
        (Severity.WARNING, "Too many messages. Please wait 60 seconds before sending another message.")
    ]


@pytest.mark.asyncio
async def test_send_message_requires_authentication() -> None:
    channel, factory, conversation, notifications = _channel()
    channel.connect()
    factory.last.open()
    factory.last.emitted.clear()

    channel.send_message("hello")

    assert factory.last.emitted == []
    assert conversation.messages == []
    assert notifications.items == [(Severity.WARNING, "Not connected to chat server")]


@pytest.mark.asyncio
async def test_send_message_emits_and_logs_user_message() -> None:
    channel, transport, conversation, _ = _authenticated()

    channel.send_message("I need a quote")

    [(name, payload)] = transport.emitted
    assert name == "chat_message"
    assert payload["message"] == "I need a quote"
    assert datetime.fromisoformat(payload["timestamp"]).utcoffset().total_seconds() == 0
    [message] = conversation.messages
    assert message.role == "user"
    assert message.content == "I need a quote"


@pytest.mark.asyncio
async def test_disconnect_is_safe_twice_and_before_connect() -> None:
    channel, factory, _, _ = _channel()
    channel.disconnect()
    assert channel.status is ChannelStatus.DISCONNECTED

    channel.connect()
    factory.last.open()
    channel.disconnect()
    channel.disconnect()

    assert factory.last.disconnect_calls == 1
    assert channel.connected is False
    assert channel.authenticated is False


@pytest.mark.asyncio
async def test_no_handler_runs_after_disconnect() -> None:
    channel, transport, conversation, notifications = _authenticated()
    notifications.items.clear()

    channel.disconnect()
    assert transport.listener_count() == 0

    transport.server("chat_response", {"message": "late"})
    transport.server("chat_error", {"error": "late"})
    assert conversation.messages == []
    assert notifications.items == []


@pytest.mark.asyncio
async def test_aclose_closes_transport() -> None:
    channel, transport, _, _ = _authenticated()
    await channel.aclose()

    assert transport.closed is True
    assert channel.status is ChannelStatus.DISCONNECTED


@pytest.mark.asyncio
async def test_server_disconnect_triggers_reconnect() -> None:
    channel, transport, conversation, _ = _authenticated()

    transport.drop(REASON_SERVER_DISCONNECT)

    assert transport.connect_calls == 2
    assert channel.connected is False
    assert channel.authenticated is False
    assert channel.status is ChannelStatus.DISCONNECTED
    assert conversation.statuses[-1] == "disconnected"


@pytest.mark.asyncio
async def test_other_disconnects_leave_reconnection_to_transport() -> None:
    channel, transport, _, _ = _authenticated()
    transport.drop(REASON_TRANSPORT_CLOSE)

    assert transport.connect_calls == 1
    assert channel.connected is False


@pytest.mark.asyncio
async def test_reauthenticates_after_reconnect() -> None:
    channel, transport, _, _ = _authenticated()
    transport.drop(REASON_TRANSPORT_CLOSE)
    transport.open()

    assert transport.emitted == [("authenticate", {"sessionId": "s-1"})]


@pytest.mark.asyncio
async def test_connect_error_is_recorded_and_notified() -> None:
    channel, factory, _, notifications = _channel()
    channel.connect()
    factory.last.fail(ConnectionError("refused"))
    factory.last.fail(ConnectionError("refused"))

    assert channel.last_error == "refused"
    assert channel.reconnect_attempts == 2
    assert notifications.messages(Severity.ERROR) == ["Connection error: refused"] * 2

    factory.last.open()
    assert channel.reconnect_attempts == 0
    assert channel.last_error is None


@pytest.mark.asyncio
async def test_reconnect_failed_notifies() -> None:
    channel, factory, _, notifications = _channel()
    channel.connect()
    factory.last.give_up(6)

    assert channel.status is ChannelStatus.DISCONNECTED
    assert notifications.messages(Severity.ERROR) == ["Unable to reach chat server after 6 attempts"]


@pytest.mark.asyncio
async def test_authentication_failed_notifies() -> None:
    channel, factory, _, notifications = _channel()
    channel.connect()
    factory.last.open()
    factory.last.server("authentication_failed", {"error": "unknown session"})

    assert channel.authenticated is False
    assert notifications.items == [(Severity.ERROR, "Authentication failed: unknown session")]


@pytest.mark.asyncio
async def test_session_restored_replays_history() -> None:
    channel, factory, conversation, _ = _channel()
    channel.connect()
    factory.last.open()
    factory.last.server(
        "session_restored",
        {
            "conversationHistory": [
                {"role": "user", "content": "hi"},
                {"role": "assistant", "content": "hello", "quickReplies": ["Yes", "No"]},
            ]
        },
    )

    assert channel.authenticated is True
    assert channel.status is ChannelStatus.AUTHENTICATED
    assert [m.content for m in conversation.messages] == ["hi", "hello"]
    assert conversation.quick_replies == ["Yes", "No"]


@pytest.mark.asyncio
async def test_chat_response_fans_out_to_conversation() -> None:
    channel, transport, conversation, _ = _authenticated()
    transport.server(
        "chat_response",
        {"message": "What is your budget?", "quickReplies": ["<10k", ">10k"], "completionRate": 40, "isComplete": False},
    )
    transport.server("chat_response", {"message": "Thanks!", "completionRate": 100, "isComplete": True})

    assert [m.role for m in conversation.messages] == ["assistant", "assistant"]
    assert conversation.messages[0].quick_replies == ["<10k", ">10k"]
    assert conversation.completion_rate == 100.0
    assert conversation.is_complete is True


@pytest.mark.asyncio
async def test_misc_server_events_fan_out() -> None:
    channel, transport, conversation, notifications = _authenticated()
    notifications.items.clear()
    channel.send_message("hi")
    message_id = conversation.messages[0].id

    transport.server("typing_indicator", {"isTyping": True})
    transport.server("message_delivered", {"messageId": message_id})
    transport.server("agent_status", {"status": "online"})
    transport.server("chat_error", {"error": "model unavailable", "retry": True})

    assert conversation.agent_typing is True
    assert conversation.messages[0].delivered is True
    assert channel.agent_status == "online"
    assert notifications.items == [(Severity.ERROR, "Chat error: model unavailable")]


@pytest.mark.asyncio
async def test_malformed_and_unknown_events_are_dropped() -> None:
    channel, transport, conversation, notifications = _authenticated()
    notifications.items.clear()

    transport.server("chat_response", {"quickReplies": []})
    transport.server("typing_indicator", "yes")
    transport.server("totally_unknown", {"x": 1})

    assert conversation.messages == []
    assert notifications.items == []
    assert channel.authenticated is True


@pytest.mark.asyncio
async def test_session_ended_keeps_transport_open() -> None:
    channel, transport, conversation, _ = _authenticated()
    channel.end_session()
    assert transport.emitted == [("end_session", None)]

    transport.server("session_ended", {"sessionId": "s-1"})

    assert channel.authenticated is False
    assert channel.connected is True
    assert channel.status is ChannelStatus.ENDED
    assert conversation.statuses[-1] == "ended"
    assert transport.disconnect_calls == 0


@pytest.mark.asyncio
async def test_end_session_requires_authentication() -> None:
    channel, factory, _, _ = _channel()
    channel.connect()
    factory.last.open()
    factory.last.emitted.clear()

    channel.end_session()
    assert factory.last.emitted == []


@pytest.mark.asyncio
async def test_auth_watchdog_warns_when_reply_is_late() -> None:
    channel, factory, _, notifications = _channel(auth_timeout_s=0.02)
    channel.connect()
    factory.last.open()

    await asyncio.sleep(0.08)

    assert channel.authenticated is False
    assert channel.last_error == "authentication timed out"
    assert notifications.items == [(Severity.WARNING, "Authentication is taking longer than expected")]


@pytest.mark.asyncio
async def test_auth_watchdog_is_cancelled_by_authentication() -> None:
    channel, factory, _, notifications = _channel(auth_timeout_s=0.02)
    channel.connect()
    factory.last.open()
    factory.last.server("authenticated", {"sessionId": "s-1"})

    await asyncio.sleep(0.08)

    assert channel.last_error is None
    assert notifications.messages(Severity.WARNING) == []


@pytest.mark.asyncio
async def test_ping_requires_connected_transport() -> None:
    channel, factory, _, _ = _channel()
    channel.ping()
    channel.connect()
    channel.ping()
    assert factory.last.emitted == []

    factory.last.open()
    factory.last.emitted.clear()
    channel.ping()
    assert factory.last.emitted == [("ping", None)]
    assert channel.last_ping_ts is not None


@pytest.mark.asyncio
async def test_pong_measures_latency() -> None:
    now = [100.0]
    factory = TransportFactory()
    channel = SessionChannel(
        make_settings(),
        conversation=RecordingConversation(),
        notifications=RecordingNotifications(),
        transport_factory=factory,
        clock=lambda: now[0],
    )
    channel.connect()
    factory.last.open()

    factory.last.server("pong", {"timestamp": 1})
    assert channel.latency_s is None

    channel.ping()
    now[0] = 100.25
    factory.last.server("pong", {"timestamp": 2})
    assert channel.latency_s == pytest.approx(0.25)


@pytest.mark.asyncio
async def test_typing_burst_emits_one_start_and_one_stop() -> None:
    channel, transport, _, _ = _authenticated(typing_quiet_period_s=0.2)

    for _ in range(4):
        channel.on_user_typing()
        await asyncio.sleep(0.01)
    assert transport.names() == ["typing_start"]
    assert channel.is_typing is True

    await asyncio.sleep(0.4)
    assert transport.names() == ["typing_start", "typing_stop"]
    assert channel.is_typing is False


@pytest.mark.asyncio
async def test_typing_ignored_until_authenticated() -> None:
    channel, factory, _, _ = _channel()
    channel.connect()
    factory.last.open()
    factory.last.emitted.clear()

    channel.start_typing()
    channel.stop_typing()

    assert factory.last.emitted == []
    assert channel.is_typing is False


@pytest.mark.asyncio
async def test_disconnect_resets_typing_without_stop() -> None:
    channel, transport, _, _ = _authenticated(typing_quiet_period_s=0.02)
    channel.on_user_typing()
    channel.disconnect()

    await asyncio.sleep(0.06)
    assert transport.names() == ["typing_start"]
    assert channel.is_typing is False


@pytest.mark.asyncio
async def test_typing_starts_fresh_after_drop_and_reauthentication() -> None:
    channel, transport, _, _ = _authenticated(typing_quiet_period_s=0.05)
    channel.on_user_typing()
    transport.drop(REASON_TRANSPORT_CLOSE)
    assert channel.is_typing is False

    await asyncio.sleep(0.1)
    transport.open()
    transport.server("authenticated", {"success": True, "sessionId": "s-1"})
    transport.emitted.clear()

    for _ in range(3):
        channel.on_user_typing()
    await asyncio.sleep(0.15)
    assert transport.names() == ["typing_start", "typing_stop"]


@pytest.mark.asyncio
async def test_typing_starts_fresh_after_session_ended() -> None:
    channel, transport, _, _ = _authenticated(typing_quiet_period_s=0.05)
    channel.on_user_typing()
    transport.server("session_ended", {"sessionId": "s-1"})
    assert channel.is_typing is False

    transport.server("authenticated", {"success": True, "sessionId": "s-1"})
    transport.emitted.clear()
    channel.on_user_typing()
    await asyncio.sleep(0.15)
    assert transport.names() == ["typing_start", "typing_stop"]


@pytest.mark.asyncio
async def test_unawaited_unauthenticated_request_is_not_reported() -> None:
    channel, _, _, _ = _channel()
    loop = asyncio.get_running_loop()
    reported: list[dict] = []
    previous = loop.get_exception_handler()
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        channel.request_summary()
        channel.request_analytics()
        gc.collect()
        await asyncio.sleep(0)
    finally:
        loop.set_exception_handler(previous)
    assert reported == []

    with pytest.raises(NotAuthenticatedError):
        await channel.request_summary()
