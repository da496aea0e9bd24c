from client.session import ChatSession
from client.state import ConnectionState, Conversation, SessionState
from client.view import ChatView, ConsoleView

__all__ = [
    "ChatSession",
    "ChatView",
    "ConnectionState",
    "ConsoleView",
    "Conversation",
    "SessionState",
]
