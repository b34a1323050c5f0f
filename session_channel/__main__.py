"""Interactive console chat client.

    python -m session_channel --server http://localhost:3000 --session-id abc123

Each input line is sent as a chat message. Commands: /summary, /analytics,
/ping, /end, /quit.
"""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
import dataclasses

from session_channel.errors import RequestTimeoutError, NotAuthenticatedError
from session_channel.runtime import load_settings, configure_logging
from session_channel.console import ConsoleNotifications, TranscriptPrinter, dim, format_payload, section_header
from session_channel.channel.session import SessionChannel
from session_channel.observers.conversation import ConversationStore

logger = logging.getLogger(__name__)

COMMANDS = ("/summary", "/analytics", "/ping", "/end", "/quit")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive chat session client")
    parser.add_argument("--server", default=None, help="Chat server URL (overrides CHAT_SERVER_URL)")
    parser.add_argument("--session-id", required=True, help="Session identity to authenticate with")
    parser.add_argument("--debug", action="store_true", help="Log debug output including transport events")
    return parser.parse_args(argv)


async def _await_reply(title: str, future: asyncio.Future) -> None:
    try:
        payload = await future
    except (NotAuthenticatedError, RequestTimeoutError) as exc:
        print(dim(f"  {title.lower()} unavailable: {exc}"))
        return
    except asyncio.CancelledError:
        return
    print(format_payload(title, payload))


async def _read_line() -> str | None:
    line = await asyncio.get_running_loop().run_in_executor(None, sys.stdin.readline)
    return line if line else None


async def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    if args.server:
        settings = dataclasses.replace(
            settings, transport=dataclasses.replace(settings.transport, server_url=args.server.rstrip("/"))
        )

    conversation = ConversationStore(session_id=args.session_id)
    conversation.subscribe(TranscriptPrinter())
    channel = SessionChannel(settings, conversation=conversation, notifications=ConsoleNotifications())

    print(f"\n{section_header('CHAT')}")
    print(dim(f"  server: {settings.transport.server_url}"))
    print(dim(f"  session: {args.session_id}"))
    print(dim(f"  commands: {' '.join(COMMANDS)}"))
    print()

    channel.connect()
    pending: set[asyncio.Task] = set()
    try:
        while True:
            line = await _read_line()
            if line is None:
                break
            text = line.strip()
            if not text:
                continue
            if text == "/quit":
                break
            if text == "/summary":
                task = asyncio.create_task(_await_reply("SUMMARY", channel.request_summary()))
            elif text == "/analytics":
                task = asyncio.create_task(_await_reply("ANALYTICS", channel.request_analytics()))
            elif text == "/ping":
                channel.ping()
                await asyncio.sleep(0.5)
                latency = channel.latency_s
                print(dim(f"  latency: {latency * 1000.0:.1f}ms" if latency is not None else "  no pong yet"))
                continue
            elif text == "/end":
                channel.end_session()
                continue
            else:
                channel.on_user_typing()
                channel.send_message(text)
                channel.stop_typing()
                continue
            pending.add(task)
            task.add_done_callback(pending.discard)
    finally:
        await channel.aclose()
        for task in list(pending):
            task.cancel()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.WARNING)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
