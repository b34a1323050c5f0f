"""Caller-visible connection states of a session channel."""

from __future__ import annotations

from enum import Enum


class ChannelStatus(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"
    ENDED = "ended"


__all__ = ["ChannelStatus"]
