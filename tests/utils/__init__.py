"""Test helpers.

- fakes.py: in-process transport, link and observer doubles
"""

from __future__ import annotations

from .fakes import (
    FakeLink,
    FakeTransport,
    ScriptedOpener,
    TransportFactory,
    RecordingConversation,
    RecordingNotifications,
    eventually,
    make_settings,
    make_transport_settings,
)

__all__ = [
    "FakeLink",
    "FakeTransport",
    "RecordingConversation",
    "RecordingNotifications",
    "ScriptedOpener",
    "TransportFactory",
    "eventually",
    "make_settings",
    "make_transport_settings",
]
