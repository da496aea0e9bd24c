from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from relay.core.prompt import NO_RESPONSE


class ReplyKind(str, Enum):
    """Documented shapes of a non-streaming inference result."""

    TEXT = "text"
    RESPONSE = "response"
    RESULT = "result"
    ENVELOPE = "envelope"
    FALLBACK = "fallback"


class InferenceReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ReplyKind = Field(description="Which result shape the text came from")
    text: str


def decode_reply(raw: Any) -> InferenceReply:
    """Decode an inference result into reply text.

    Precedence: a bare string, then a string ``response`` field, then a
    string ``result`` field. The REST API wraps the model output in an
    envelope whose ``result`` is itself an object; that object is decoded
    the same way. Anything else falls back to a fixed placeholder.
    """
    if isinstance(raw, str):
        return InferenceReply(kind=ReplyKind.TEXT, text=raw)

    if isinstance(raw, dict):
        if isinstance(raw.get("response"), str):
            return InferenceReply(kind=ReplyKind.RESPONSE, text=raw["response"])
        result = raw.get("result")
        if isinstance(result, str):
            return InferenceReply(kind=ReplyKind.RESULT, text=result)
        if isinstance(result, dict):
            inner = decode_reply(result)
            if inner.kind is not ReplyKind.FALLBACK:
                return InferenceReply(kind=ReplyKind.ENVELOPE, text=inner.text)

    return InferenceReply(kind=ReplyKind.FALLBACK, text=NO_RESPONSE)
