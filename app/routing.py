from __future__ import annotations

from enum import Enum


class RouteKind(str, Enum):
    WEBSOCKET = "websocket"
    STATIC = "static"
    CHAT = "chat"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    NOT_FOUND = "not_found"


CHAT_PATH = "/api/chat"
WS_PATH = "/ws"


def resolve_route(path: str, method: str) -> RouteKind:
    """Classify a request by path and method. Order of the checks matters."""
    if path == WS_PATH:
        return RouteKind.WEBSOCKET
    if path == "/" or not path.startswith("/api/"):
        return RouteKind.STATIC
    if path == CHAT_PATH:
        if method.upper() == "POST":
            return RouteKind.CHAT
        return RouteKind.METHOD_NOT_ALLOWED
    return RouteKind.NOT_FOUND
