from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from relay.core.messages import ChatMessage, Role
from relay.core.prompt import GREETING


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ConnectionLifecycle:
    """Socket handle plus where it is in the connect/close cycle."""

    def __init__(self) -> None:
        self.state = ConnectionState.DISCONNECTED
        self.socket: Optional[Any] = None

    @property
    def ready(self) -> bool:
        return self.state is ConnectionState.CONNECTED and self.socket is not None

    def connecting(self) -> None:
        self.state = ConnectionState.CONNECTING
        self.socket = None

    def attach(self, socket: Any) -> None:
        self.state = ConnectionState.CONNECTED
        self.socket = socket

    def detach(self) -> None:
        self.state = ConnectionState.DISCONNECTED
        self.socket = None


class Conversation:
    """Ordered chat history kept only in client memory."""

    def __init__(self, messages: Optional[List[ChatMessage]] = None) -> None:
        if messages is None:
            messages = [ChatMessage(role="assistant", content=GREETING)]
        self.messages: List[ChatMessage] = list(messages)

    def append(self, role: Role, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    def to_payload(self) -> Dict[str, List[Dict[str, str]]]:
        return {"messages": [m.model_dump() for m in self.messages]}

    def __len__(self) -> int:
        return len(self.messages)


class SessionState:
    def __init__(self, conversation: Optional[Conversation] = None) -> None:
        self.connection = ConnectionLifecycle()
        self.conversation = conversation if conversation is not None else Conversation()
        self.is_processing = False
