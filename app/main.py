from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from app.assets import StaticAssetStore
from app.routing import CHAT_PATH, WS_PATH, RouteKind, resolve_route
from config.settings import Settings, get_settings
from relay.core.prompt import ERROR_REPLY
from relay.inference import InferenceClient
from relay.relay import ChatRelay, Inference


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("chat_relay")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def relay_body(upstream: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the upstream body unchanged; the upstream is closed even if the client leaves early."""
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    finally:
        await upstream.aclose()


def create_app(
    settings: Optional[Settings] = None, inference: Optional[Inference] = None
) -> FastAPI:
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned: Optional[InferenceClient] = None
        if inference is None:
            owned = InferenceClient.from_settings(settings)
            app.state.relay = ChatRelay(owned, settings)
        logger.info(
            "Config: model=%s account_set=%s static_dir=%s",
            settings.model_id,
            bool(settings.cloudflare_account_id),
            settings.static_dir,
        )
        yield
        if owned is not None:
            await owned.close()

    # No docs routes: every path outside /api/ belongs to the static store.
    app = FastAPI(
        title="LLM Chat Relay",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.assets = StaticAssetStore(settings.static_dir)
    if inference is not None:
        app.state.relay = ChatRelay(inference, settings)

    # CORS: allow local frontend during development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.post(CHAT_PATH)
    async def chat(request: Request) -> Response:
        relay: ChatRelay = request.app.state.relay
        try:
            body = await request.body()
            upstream = await relay.stream_chat(body)
        except Exception as e:
            logger.exception("Error processing chat request: %s", e)
            return JSONResponse(status_code=500, content={"error": "Failed to process request"})

        return StreamingResponse(
            relay_body(upstream),
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type", "text/event-stream"),
        )

    @app.websocket(WS_PATH)
    async def chat_socket(websocket: WebSocket) -> None:
        relay: ChatRelay = websocket.app.state.relay
        await websocket.accept()
        logger.info("Socket opened: %s", websocket.client)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                frame = message.get("text")
                if frame is None:
                    frame = message.get("bytes") or b""
                try:
                    text = await relay.reply(frame)
                except Exception as e:
                    logger.exception("Error processing socket message: %s", e)
                    text = ERROR_REPLY
                await websocket.send_json({"response": text})
        except WebSocketDisconnect:
            pass
        logger.info("Socket closed: %s", websocket.client)

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        kind = resolve_route(request.url.path, request.method)
        if kind is RouteKind.WEBSOCKET:
            # Plain HTTP on the socket path; real upgrades go to chat_socket.
            return PlainTextResponse("Expected Upgrade: websocket", status_code=426)
        if kind is RouteKind.STATIC:
            return await request.app.state.assets.fetch(request)
        if kind is RouteKind.CHAT:
            return await chat(request)
        if kind is RouteKind.METHOD_NOT_ALLOWED:
            return PlainTextResponse("Method not allowed", status_code=405)
        return PlainTextResponse("Not found", status_code=404)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
