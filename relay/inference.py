from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from config.settings import Settings


class InferenceError(RuntimeError):
    """The inference API could not be reached or rejected the request."""


class InferenceClient:
    """Thin async client for the Workers AI ``/ai/run/{model}`` endpoint."""

    def __init__(
        self,
        account_id: Optional[str],
        api_token: Optional[str],
        base_url: str = "https://api.cloudflare.com/client/v4",
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        self._account_id = account_id
        headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            **client_kwargs,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **client_kwargs: Any) -> "InferenceClient":
        return cls(
            account_id=settings.cloudflare_account_id,
            api_token=settings.cloudflare_api_token,
            base_url=settings.inference_base_url,
            timeout=settings.inference_timeout,
            **client_kwargs,
        )

    def _run_path(self, model_id: str) -> str:
        if not self._account_id:
            raise InferenceError("CLOUDFLARE_ACCOUNT_ID not configured")
        return f"/accounts/{self._account_id}/ai/run/{model_id}"

    async def run(self, model_id: str, inputs: Dict[str, Any]) -> Any:
        """Run the model and return the decoded JSON body."""
        path = self._run_path(model_id)
        try:
            response = await self._client.post(path, json=inputs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise InferenceError(f"Inference API call failed: {exc}") from exc
        except ValueError as exc:
            raise InferenceError(f"Inference API returned invalid JSON: {exc}") from exc

    async def run_raw(self, model_id: str, inputs: Dict[str, Any]) -> httpx.Response:
        """Run the model in streaming mode and return the open upstream response.

        The caller owns the response and must ``aclose()`` it once the body
        has been consumed.
        """
        path = self._run_path(model_id)
        request = self._client.build_request("POST", path, json={**inputs, "stream": True})
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise InferenceError(f"Inference API call failed: {exc}") from exc

        if response.is_error:
            await response.aclose()
            raise InferenceError(
                f"Inference API returned {response.status_code} for {model_id}"
            )
        return response

    async def close(self) -> None:
        await self._client.aclose()
