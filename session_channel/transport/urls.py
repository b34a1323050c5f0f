"""URL helpers for the channel endpoints."""

from __future__ import annotations

from urllib.parse import urlparse, urlunparse


def _join_path(base_path: str, path: str) -> str:
    base_path = (base_path or "").rstrip("/")
    if base_path.endswith(path):
        return base_path
    return f"{base_path}{path}"


def ws_url(server_url: str, path: str) -> str:
    """Map an http(s)/ws(s)/bare host server URL to the websocket endpoint URL."""
    server_url = (server_url or "").strip()
    if not server_url.startswith(("http://", "https://", "ws://", "wss://")):
        server_url = f"http://{server_url}"
    parsed = urlparse(server_url)
    scheme = {"http": "ws", "https": "wss"}.get(parsed.scheme, parsed.scheme)
    return urlunparse((scheme, parsed.netloc, _join_path(parsed.path, path), "", parsed.query, ""))


def http_url(server_url: str, path: str) -> str:
    """Map a server URL to the plain HTTP endpoint used by the polling fallback."""
    server_url = (server_url or "").strip()
    if not server_url.startswith(("http://", "https://", "ws://", "wss://")):
        server_url = f"http://{server_url}"
    parsed = urlparse(server_url)
    scheme = {"ws": "http", "wss": "https"}.get(parsed.scheme, parsed.scheme)
    return urlunparse((scheme, parsed.netloc, _join_path(parsed.path, path), "", "", ""))


__all__ = ["http_url", "ws_url"]
