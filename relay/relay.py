from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx

from config.settings import Settings, get_settings
from relay.core.messages import ensure_system_prompt, extract_messages, load_body
from relay.results import decode_reply


logger = logging.getLogger(__name__)


class Inference(Protocol):
    async def run(self, model_id: str, inputs: Dict[str, Any]) -> Any: ...

    async def run_raw(self, model_id: str, inputs: Dict[str, Any]) -> httpx.Response: ...


class ChatRelay:
    """Forwards a client conversation to the inference API.

    Holds no conversation state: every call builds its own message list
    from the payload it was given.
    """

    def __init__(self, inference: Inference, settings: Optional[Settings] = None) -> None:
        self._inference = inference
        self._settings = settings or get_settings()

    def build_inputs(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        return {
            "messages": ensure_system_prompt(messages),
            "max_tokens": self._settings.max_tokens,
        }

    async def stream_chat(self, body: Union[str, bytes, None]) -> httpx.Response:
        """HTTP path: returns the raw upstream streaming response."""
        messages = extract_messages(load_body(body))
        inputs = self.build_inputs(messages)
        logger.info(
            "Streaming chat: model=%s messages=%s", self._settings.model_id, len(messages)
        )
        return await self._inference.run_raw(self._settings.model_id, inputs)

    async def reply(self, frame: Union[str, bytes]) -> str:
        """WebSocket path: returns the reply text for one inbound frame.

        Streaming is not used here; the whole reply goes back as a single frame.
        """
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8")
        messages = extract_messages(json.loads(frame))
        inputs = self.build_inputs(messages)
        logger.info(
            "Socket chat: model=%s messages=%s", self._settings.model_id, len(messages)
        )
        result = await self._inference.run(self._settings.model_id, inputs)
        reply = decode_reply(result)
        logger.debug("Reply decoded as %s (%s chars)", reply.kind.value, len(reply.text))
        return reply.text
