from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.status import Status

from client.state import ConnectionState
from relay.core.messages import Role


class ChatView(ABC):
    """Rendering seam between the session controller and a UI."""

    @abstractmethod
    def add_message(self, role: Role, content: str) -> None:
        pass

    @abstractmethod
    def show_typing(self) -> None:
        pass

    @abstractmethod
    def hide_typing(self) -> None:
        pass

    @abstractmethod
    def enable_input(self) -> None:
        pass

    @abstractmethod
    def disable_input(self) -> None:
        pass

    def clear_input(self) -> None:
        """Drop whatever is left in the input field. Line-based UIs have nothing to clear."""

    def connection_changed(self, state: ConnectionState) -> None:
        """Called on every connection state transition."""


ROLE_STYLES = {
    "user": ("You", "cyan"),
    "assistant": ("Assistant", "green"),
    "system": ("System", "magenta"),
}


class ConsoleView(ChatView):
    """Terminal chat log rendered with rich.

    Input is line-based; ``input_enabled`` tells the prompt loop when it may
    read the next line.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.input_enabled = asyncio.Event()
        self.input_enabled.set()
        self._status: Optional[Status] = None

    def add_message(self, role: Role, content: str) -> None:
        title, style = ROLE_STYLES.get(role, (role, "white"))
        self.console.print(
            Panel(content, title=title, title_align="left", border_style=style)
        )

    def show_typing(self) -> None:
        if self._status is None:
            self._status = self.console.status("Assistant is typing...")
            self._status.start()

    def hide_typing(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def enable_input(self) -> None:
        self.input_enabled.set()

    def disable_input(self) -> None:
        self.input_enabled.clear()

    def connection_changed(self, state: ConnectionState) -> None:
        if state is ConnectionState.CONNECTED:
            self.console.print("[dim]Connected.[/dim]")
        elif state is ConnectionState.DISCONNECTED:
            self.console.print("[dim]Disconnected.[/dim]")
