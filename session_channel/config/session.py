"""Session-level timing configuration (env names and defaults)."""

from __future__ import annotations

ENV_CHAT_TYPING_QUIET_PERIOD_S = "CHAT_TYPING_QUIET_PERIOD_S"
ENV_CHAT_REQUEST_TIMEOUT_S = "CHAT_REQUEST_TIMEOUT_S"
ENV_CHAT_AUTH_TIMEOUT_S = "CHAT_AUTH_TIMEOUT_S"

# Quiet period after the last keystroke before `typing_stop` is sent.
DEFAULT_CHAT_TYPING_QUIET_PERIOD_S = 1.5

# 0 disables the timeout (wait for the reply forever).
DEFAULT_CHAT_REQUEST_TIMEOUT_S = 30.0

# 0 disables the handshake watchdog.
DEFAULT_CHAT_AUTH_TIMEOUT_S = 10.0

# Conversation store: completion percentage at which a lead is considered complete.
COMPLETION_THRESHOLD_PCT = 80.0

# Notification display duration hint for UI surfaces.
NOTIFICATION_DEFAULT_DURATION_S = 5.0

__all__ = [
    "COMPLETION_THRESHOLD_PCT",
    "DEFAULT_CHAT_AUTH_TIMEOUT_S",
    "DEFAULT_CHAT_REQUEST_TIMEOUT_S",
    "DEFAULT_CHAT_TYPING_QUIET_PERIOD_S",
    "ENV_CHAT_AUTH_TIMEOUT_S",
    "ENV_CHAT_REQUEST_TIMEOUT_S",
    "ENV_CHAT_TYPING_QUIET_PERIOD_S",
    "NOTIFICATION_DEFAULT_DURATION_S",
]
