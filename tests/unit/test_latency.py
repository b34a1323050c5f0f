from __future__ import annotations

import pytest

from session_channel.channel.latency import LatencyProbe


def test_pong_without_ping_is_ignored() -> None:
    probe = LatencyProbe(clock=lambda: 10.0)
    assert probe.record_pong() is None
    assert probe.latency_s is None


def test_latency_is_elapsed_since_last_ping() -> None:
    now = [10.0]
    probe = LatencyProbe(clock=lambda: now[0])
    probe.mark_sent()
    now[0] = 10.125
    assert probe.record_pong() == 0.125

    probe.mark_sent()
    now[0] = 10.2
    probe.record_pong()
    assert probe.latency_s == pytest.approx(0.075)


def test_latency_never_negative() -> None:
    now = [5.0]
    probe = LatencyProbe(clock=lambda: now[0])
    probe.mark_sent()
    now[0] = 4.0
    assert probe.record_pong() == 0.0
