"""Environment parsing for channel settings."""

from __future__ import annotations

import os

from session_channel.state.settings import ChannelSettings, SessionSettings, TransportSettings
from session_channel.config.session import (
    ENV_CHAT_AUTH_TIMEOUT_S,
    ENV_CHAT_REQUEST_TIMEOUT_S,
    DEFAULT_CHAT_AUTH_TIMEOUT_S,
    ENV_CHAT_TYPING_QUIET_PERIOD_S,
    DEFAULT_CHAT_REQUEST_TIMEOUT_S,
    DEFAULT_CHAT_TYPING_QUIET_PERIOD_S,
)
from session_channel.config.transport import (
    KNOWN_TRANSPORTS,
    ENV_CHAT_WS_PATH,
    ENV_CHAT_POLL_PATH,
    ENV_CHAT_SERVER_URL,
    ENV_CHAT_TRANSPORTS,
    DEFAULT_CHAT_WS_PATH,
    ENV_CHAT_RECONNECTION,
    DEFAULT_CHAT_POLL_PATH,
    DEFAULT_CHAT_SERVER_URL,
    DEFAULT_CHAT_TRANSPORTS,
    DEFAULT_CHAT_RECONNECTION,
    ENV_CHAT_CONNECT_TIMEOUT_S,
    ENV_CHAT_RECONNECTION_JITTER,
    DEFAULT_CHAT_CONNECT_TIMEOUT_S,
    ENV_CHAT_RECONNECTION_DELAY_S,
    ENV_CHAT_RECONNECTION_ATTEMPTS,
    DEFAULT_CHAT_RECONNECTION_JITTER,
    DEFAULT_CHAT_RECONNECTION_DELAY_S,
    ENV_CHAT_RECONNECTION_DELAY_MAX_S,
    DEFAULT_CHAT_RECONNECTION_ATTEMPTS,
    DEFAULT_CHAT_RECONNECTION_DELAY_MAX_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _transports_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    names = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    unknown = [n for n in names if n not in KNOWN_TRANSPORTS]
    if unknown:
        raise ValueError(f"{name} contains unknown transports {unknown}; expected any of {sorted(KNOWN_TRANSPORTS)}")
    return names or default


def _path_env(name: str, default: str) -> str:
    path = _str_env(name, default)
    return path if path.startswith("/") else f"/{path}"


def _load_transport_settings() -> TransportSettings:
    delay_s = max(0.0, _float_env(ENV_CHAT_RECONNECTION_DELAY_S, DEFAULT_CHAT_RECONNECTION_DELAY_S))
    delay_max_s = max(delay_s, _float_env(ENV_CHAT_RECONNECTION_DELAY_MAX_S, DEFAULT_CHAT_RECONNECTION_DELAY_MAX_S))
    jitter = _float_env(ENV_CHAT_RECONNECTION_JITTER, DEFAULT_CHAT_RECONNECTION_JITTER)

    return TransportSettings(
        server_url=_str_env(ENV_CHAT_SERVER_URL, DEFAULT_CHAT_SERVER_URL).rstrip("/"),
        ws_path=_path_env(ENV_CHAT_WS_PATH, DEFAULT_CHAT_WS_PATH),
        poll_path=_path_env(ENV_CHAT_POLL_PATH, DEFAULT_CHAT_POLL_PATH),
        reconnection=_bool_env(ENV_CHAT_RECONNECTION, DEFAULT_CHAT_RECONNECTION),
        max_attempts=max(0, _int_env(ENV_CHAT_RECONNECTION_ATTEMPTS, DEFAULT_CHAT_RECONNECTION_ATTEMPTS)),
        delay_s=delay_s,
        delay_max_s=delay_max_s,
        randomization_factor=min(1.0, max(0.0, jitter)),
        timeout_s=max(0.1, _float_env(ENV_CHAT_CONNECT_TIMEOUT_S, DEFAULT_CHAT_CONNECT_TIMEOUT_S)),
        transports=_transports_env(ENV_CHAT_TRANSPORTS, DEFAULT_CHAT_TRANSPORTS),
    )


def _load_session_settings() -> SessionSettings:
    return SessionSettings(
        typing_quiet_period_s=max(
            0.0, _float_env(ENV_CHAT_TYPING_QUIET_PERIOD_S, DEFAULT_CHAT_TYPING_QUIET_PERIOD_S)
        ),
        request_timeout_s=max(0.0, _float_env(ENV_CHAT_REQUEST_TIMEOUT_S, DEFAULT_CHAT_REQUEST_TIMEOUT_S)),
        auth_timeout_s=max(0.0, _float_env(ENV_CHAT_AUTH_TIMEOUT_S, DEFAULT_CHAT_AUTH_TIMEOUT_S)),
    )


def load_settings() -> ChannelSettings:
    return ChannelSettings(
        transport=_load_transport_settings(),
        session=_load_session_settings(),
    )


__all__ = ["load_settings"]
