from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Union

import websockets
from websockets.exceptions import WebSocketException

from client.state import ConnectionState, SessionState
from client.view import ChatView
from relay.core.prompt import ERROR_REPLY


logger = logging.getLogger(__name__)


class ChatSession:
    """Owns the session state and drives the view.

    ``run()`` keeps a socket open, reconnecting after a fixed delay for as
    long as the session is running. ``send_message()`` sends the whole
    conversation for one user turn; only one turn is in flight at a time.
    """

    def __init__(
        self,
        url: str,
        view: ChatView,
        reconnect_delay: float = 2.0,
        state: Optional[SessionState] = None,
    ) -> None:
        self.url = url
        self.view = view
        self.reconnect_delay = reconnect_delay
        self.state = state if state is not None else SessionState()
        self._running = False

    def render_history(self) -> None:
        for message in self.state.conversation.messages:
            self.view.add_message(message.role, message.content)

    def stop(self) -> None:
        self._running = False

    def _set_connection(self, state: ConnectionState, socket: Any = None) -> None:
        connection = self.state.connection
        if state is ConnectionState.CONNECTED:
            connection.attach(socket)
        elif state is ConnectionState.CONNECTING:
            connection.connecting()
        else:
            connection.detach()
        self.view.connection_changed(state)

    async def run(self) -> None:
        self._running = True
        while self._running:
            self._set_connection(ConnectionState.CONNECTING)
            try:
                async with websockets.connect(self.url) as socket:
                    self._set_connection(ConnectionState.CONNECTED, socket)
                    logger.info("WebSocket connected")
                    async for frame in socket:
                        self.handle_frame(frame)
            except (OSError, WebSocketException) as exc:
                logger.warning("WebSocket error: %s", exc)
            except Exception as exc:
                # Cancellation is not an Exception and still ends the loop.
                logger.exception("Unexpected WebSocket failure: %s", exc)
            self._set_connection(ConnectionState.DISCONNECTED)
            if not self._running:
                break
            logger.info("WebSocket disconnected, retrying in %ss...", self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    async def send_message(self, text: str) -> bool:
        """Send one user turn. Returns False when the send was not attempted."""
        message = text.strip()
        if not message or self.state.is_processing or not self.state.connection.ready:
            return False

        # Claimed before the first await so a concurrent call sees it.
        self.state.is_processing = True
        self.view.disable_input()
        self.view.add_message("user", message)
        self.view.clear_input()
        self.view.show_typing()
        self.state.conversation.append("user", message)

        try:
            await self.state.connection.socket.send(
                json.dumps(self.state.conversation.to_payload())
            )
        except Exception as e:
            logger.error("WebSocket send error: %s", e)
            self.view.add_message("assistant", ERROR_REPLY)
            self._finish_turn()
        return True

    def handle_frame(self, frame: Union[str, bytes]) -> None:
        """Expects ``{"response": "..."}``; always releases the input afterwards."""
        try:
            data = json.loads(frame)
            response = data.get("response") if isinstance(data, dict) else None
            if isinstance(response, str) and response:
                self.view.add_message("assistant", response)
                self.state.conversation.append("assistant", response)
        except ValueError as e:
            logger.error("WebSocket message error: %s", e)
        self._finish_turn()

    def _finish_turn(self) -> None:
        self.view.hide_typing()
        self.state.is_processing = False
        self.view.enable_input()
