from .events import ServerEvent
from .parser import parse_server_event
from .envelope import build_envelope, decode_envelope, encode_envelope, parse_envelope

__all__ = [
    "ServerEvent",
    "build_envelope",
    "decode_envelope",
    "encode_envelope",
    "parse_envelope",
    "parse_server_event",
]
