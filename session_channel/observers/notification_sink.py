"""Interface of the user-facing notification surface."""

from __future__ import annotations

from typing import Protocol

from .severity import Severity


class NotificationSink(Protocol):
    def notify(self, severity: Severity, message: str) -> None: ...


__all__ = ["NotificationSink"]
