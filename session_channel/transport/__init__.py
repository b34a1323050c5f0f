from .link import TransportLink
from .urls import ws_url, http_url
from .client import LinkOpener, ReconnectingTransport
from .backoff import Backoff
from .emitter import EventTransport
from .polling import PollingLink
from .interface import ChannelTransport
from .websocket import WebSocketLink

__all__ = [
    "Backoff",
    "ChannelTransport",
    "EventTransport",
    "LinkOpener",
    "PollingLink",
    "ReconnectingTransport",
    "TransportLink",
    "WebSocketLink",
    "http_url",
    "ws_url",
]
