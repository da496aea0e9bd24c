"""Pytest configuration and shared fixtures."""
import copy

import httpx
import pytest

from config.settings import Settings

MODEL_ID = "@cf/meta/llama-3.3-70b-instruct-fp8-fast"
SSE_BODY = b'data: {"response":"hel"}\n\ndata: {"response":"lo"}\n\ndata: [DONE]\n\n'


class FakeInference:
    """Stands in for the inference API.

    ``outcomes`` is consumed one per call; an exception instance is raised,
    anything else is returned. The last outcome repeats.
    """

    def __init__(self, *outcomes, stream_body=SSE_BODY):
        self.outcomes = list(outcomes) or ["hello"]
        self.stream_body = stream_body
        self.calls = []
        self.raw_calls = []

    def _next(self):
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def run(self, model_id, inputs):
        self.calls.append((model_id, copy.deepcopy(inputs)))
        return self._next()

    async def run_raw(self, model_id, inputs):
        self.raw_calls.append((model_id, copy.deepcopy(inputs)))
        self._next()
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=self.stream_body,
        )


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the static store at a temporary directory."""
    s = Settings()
    s.app_env = "test"
    s.model_id = MODEL_ID
    s.max_tokens = 1024
    s.static_dir = str(tmp_path)
    s.cloudflare_account_id = "acc-123"
    s.cloudflare_api_token = "token-abc"
    s.inference_base_url = "https://api.cloudflare.com/client/v4"
    s.inference_timeout = None
    return s


@pytest.fixture
def fake_inference():
    return FakeInference("hello")
