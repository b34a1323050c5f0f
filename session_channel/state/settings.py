"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TransportSettings:
    server_url: str
    ws_path: str
    poll_path: str
    reconnection: bool
    max_attempts: int
    delay_s: float
    delay_max_s: float
    randomization_factor: float
    timeout_s: float
    transports: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SessionSettings:
    typing_quiet_period_s: float
    request_timeout_s: float
    auth_timeout_s: float


@dataclass(frozen=True, slots=True)
class ChannelSettings:
    transport: TransportSettings
    session: SessionSettings


__all__ = ["ChannelSettings", "SessionSettings", "TransportSettings"]
