from __future__ import annotations

"""No server-side memory.

The client owns the whole conversation and sends it on every turn. These
helpers only shape the message list of a single request before it is
forwarded; nothing here outlives the request.
"""

import json
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from relay.core.prompt import SYSTEM_PROMPT


Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role = Field(..., description="'system', 'user' or 'assistant'")
    content: str


_MESSAGE_LIST = TypeAdapter(List[ChatMessage])


def load_body(raw: Union[str, bytes, None]) -> Dict[str, Any]:
    """Lenient JSON body decode: anything that is not a JSON object is ``{}``."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def extract_messages(payload: Any) -> List[Dict[str, str]]:
    """Return the validated ``messages`` list of a request payload.

    A missing ``messages`` key means an empty list; an explicit ``null``
    payload or ``null`` list is rejected.
    """
    if payload is None:
        raise ValueError("Request payload is null")
    if not isinstance(payload, dict):
        return []
    messages = payload.get("messages", [])
    return [m.model_dump() for m in _MESSAGE_LIST.validate_python(messages)]


def has_system_message(messages: List[Dict[str, str]]) -> bool:
    return any(msg.get("role") == "system" for msg in messages)


def ensure_system_prompt(
    messages: List[Dict[str, str]], system_prompt: str = SYSTEM_PROMPT
) -> List[Dict[str, str]]:
    """Prepend the default system message in place unless one is already present."""
    if not has_system_message(messages):
        messages.insert(0, {"role": "system", "content": system_prompt})
    return messages
