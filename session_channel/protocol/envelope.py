"""JSON envelope codec for channel frames: {"type": <event>, "payload": <object|null>}."""

from __future__ import annotations

from typing import Any

import orjson

from session_channel.errors import ProtocolError
from session_channel.config.protocol import KEY_TYPE, KEY_PAYLOAD


def build_envelope(name: str, payload: Any = None) -> dict[str, Any]:
    return {KEY_TYPE: name, KEY_PAYLOAD: payload}


def encode_envelope(name: str, payload: Any = None) -> str:
    return orjson.dumps(build_envelope(name, payload)).decode("utf-8")


def parse_envelope(msg: Any) -> tuple[str, Any]:
    if not isinstance(msg, dict):
        raise ProtocolError("frame must be a JSON object")

    name = msg.get(KEY_TYPE)
    if not isinstance(name, str) or not name.strip():
        raise ProtocolError("frame missing non-empty 'type'")

    return name.strip(), msg.get(KEY_PAYLOAD)


def decode_envelope(raw: str | bytes) -> tuple[str, Any]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"invalid JSON: {exc}") from exc
    return parse_envelope(msg)


__all__ = ["build_envelope", "decode_envelope", "encode_envelope", "parse_envelope"]
