"""HTTP endpoints for the chat UI.

POST /api/chat    -> {"response": ..., "thinking": ...}
POST /api/stream  -> text/event-stream of token/thinking/complete/error events
GET  /api/models  -> model catalog
"""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ..config import OpenRouterCredentials
from ..errors import ConfigurationError, TransportError, ValidationError
from ..llm import LLMProvider, OpenRouterProvider, list_models, validate_request
from ..llm.models import ChatMessage, StreamCallbacks
from ..streaming import CancellationToken, stream_events

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], LLMProvider]

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _provider_from_env() -> LLMProvider:
    return OpenRouterProvider(OpenRouterCredentials.from_env())


def create_app(provider_factory: ProviderFactory | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        provider_factory: Creates the provider at startup
            (default: OpenRouter configured from the environment)

    Raises:
        ConfigurationError: At startup, if the default factory finds no API key
    """
    factory = provider_factory or _provider_from_env

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.provider = factory()
        try:
            yield
        finally:
            await app.state.provider.close()

    app = FastAPI(title="Facade", lifespan=lifespan)
    _register_exception_handlers(app)

    @app.get("/api/models")
    async def models() -> list[dict[str, Any]]:
        return [model.model_dump() for model in list_models()]

    @app.post("/api/chat")
    async def chat(request: Request) -> dict[str, str]:
        messages, model_key = await _read_chat_request(request)
        result = await request.app.state.provider.complete(messages, model_key)
        return {"response": result.response, "thinking": result.thinking}

    @app.post("/api/stream")
    async def stream(request: Request) -> StreamingResponse:
        messages, model_key = await _read_chat_request(request)
        provider: LLMProvider = request.app.state.provider

        async def run(callbacks: StreamCallbacks, cancel: CancellationToken) -> None:
            await provider.stream_completion(messages, model_key, callbacks, cancel)

        return StreamingResponse(
            stream_events(run),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return app


async def _read_chat_request(request: Request) -> tuple[list[ChatMessage], str]:
    """Parse and validate ``{"messages": [...], "modelKey": "..."}``."""
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("body must be valid JSON") from None
    if not isinstance(body, dict):
        raise ValidationError("body must be a JSON object")

    messages, model = validate_request(body.get("messages"), body.get("modelKey"))
    return messages, model.key


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
        logger.warning("Backend request failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=502)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Request failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=500)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse({"error": str(exc)}, status_code=500)
