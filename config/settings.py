from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    app_env: str = os.getenv("APP_ENV", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Workers AI REST endpoint
    cloudflare_account_id: Optional[str] = os.getenv("CLOUDFLARE_ACCOUNT_ID")
    cloudflare_api_token: Optional[str] = os.getenv("CLOUDFLARE_API_TOKEN")
    inference_base_url: str = os.getenv(
        "INFERENCE_BASE_URL", "https://api.cloudflare.com/client/v4"
    )
    inference_timeout: Optional[float] = _optional_float("INFERENCE_TIMEOUT")
    model_id: str = os.getenv("MODEL_ID", "@cf/meta/llama-3.3-70b-instruct-fp8-fast")
    max_tokens: int = int(os.getenv("MAX_TOKENS", "1024"))

    static_dir: str = os.getenv("STATIC_DIR", "public")

    # Terminal client
    chat_ws_url: str = os.getenv("CHAT_WS_URL", "ws://127.0.0.1:8000/ws")
    reconnect_delay: float = float(os.getenv("RECONNECT_DELAY", "2.0"))

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
