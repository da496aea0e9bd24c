"""Terminal chat client.

    python -m client [ws-url]

Type a message and press Enter to send it. Ctrl-D or Ctrl-C quits.
"""
from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import IO, Optional

from client.session import ChatSession
from client.view import ConsoleView
from config.settings import get_settings


logging.basicConfig(level=logging.WARNING, format="[%(asctime)s] %(levelname)s - %(message)s")


def start_stdin_reader(
    loop: asyncio.AbstractEventLoop,
    lines: "asyncio.Queue[str]",
    stream: Optional[IO[str]] = None,
) -> threading.Thread:
    """Read lines on a daemon thread so a pending read never blocks shutdown.

    An empty string is queued at end of input.
    """
    source = stream if stream is not None else sys.stdin

    def read() -> None:
        try:
            for line in source:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            loop.call_soon_threadsafe(lines.put_nowait, "")
        except RuntimeError:
            # Event loop already closed while the process exits.
            return

    reader = threading.Thread(target=read, name="stdin-reader", daemon=True)
    reader.start()
    return reader


async def prompt_loop(session: ChatSession, view: ConsoleView) -> None:
    lines: asyncio.Queue[str] = asyncio.Queue()
    start_stdin_reader(asyncio.get_running_loop(), lines)
    while True:
        await view.input_enabled.wait()
        line = await lines.get()
        if not line:
            break
        if not await session.send_message(line) and line.strip():
            view.console.print("[yellow]Not connected yet, message not sent.[/yellow]")


async def main(url: str) -> None:
    settings = get_settings()
    view = ConsoleView()
    session = ChatSession(url, view, reconnect_delay=settings.reconnect_delay)
    session.render_history()

    connection = asyncio.create_task(session.run())
    try:
        await prompt_loop(session, view)
    finally:
        session.stop()
        connection.cancel()
        view.hide_typing()


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else get_settings().chat_ws_url
    try:
        asyncio.run(main(target))
    except KeyboardInterrupt:
        pass
