"""Shared error types for the session channel client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NotAuthenticatedError(Exception):
    """Raised (via a failed future) when a correlated request is issued before authentication."""

    operation: str

    def __str__(self) -> str:
        return f"{self.operation}: not authenticated"


@dataclass(frozen=True, slots=True)
class RequestTimeoutError(Exception):
    """Raised (via a failed future) when a correlated request receives no reply in time."""

    key: str
    timeout_s: float

    def __str__(self) -> str:
        return f"no '{self.key}' reply within {self.timeout_s:.1f}s"


@dataclass(frozen=True, slots=True)
class LinkClosedError(Exception):
    """Raised by a transport link when the underlying connection is gone."""

    reason: str
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.reason}: {self.detail}" if self.detail else self.reason


class TransportError(ConnectionError):
    """A connection attempt failed on every configured mechanism."""


class ProtocolError(ValueError):
    """A frame or event payload does not match the channel vocabulary."""


__all__ = [
    "LinkClosedError",
    "NotAuthenticatedError",
    "ProtocolError",
    "RequestTimeoutError",
    "TransportError",
]
