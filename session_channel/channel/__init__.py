from .keys import RequestKey
from .latency import LatencyProbe
from .session import SessionChannel, TransportFactory
from .debouncer import TypingDebouncer
from .correlator import RequestCorrelator

__all__ = [
    "LatencyProbe",
    "RequestCorrelator",
    "RequestKey",
    "SessionChannel",
    "TransportFactory",
    "TypingDebouncer",
]
