"""
OpenAI-compatible API endpoints.

Provides /v1/chat/completions and /v1/models endpoints compatible
with OpenAI clients, plus the legacy /ask endpoint and a plain-text
health string at /.
"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from .errors import InvalidInput, ProxyError
from .formatting import build_completion, stream_completion
from .models import AskAnswer, ModelInfo, ModelList
from .pipeline import ChatPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def _pipeline(request: Request) -> ChatPipeline:
    return request.app.state.pipeline


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise InvalidInput("Request body must be valid JSON") from None


def _error_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, ProxyError):
        logger.warning(f"Rejected request: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    logger.exception(f"Error: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@router.get("/", response_class=PlainTextResponse)
async def root(request: Request):
    """Service health string."""
    cfg = _pipeline(request).cfg
    return f"Gemini + OpenRouter proxy running (default model: {cfg.gemini_model})"


@router.get("/v1/models")
async def list_models(request: Request):
    """
    List available models (OpenAI-compatible).

    Returns the statically configured model identifiers.
    """
    cfg = _pipeline(request).cfg
    created = int(time.time())

    models = [
        ModelInfo(
            id=model_id,
            created=created,
            owned_by="openrouter" if model_id.startswith("openrouter:") else "google",
        )
        for model_id in cfg.models
    ]
    return ModelList(data=models)


@router.post("/v1/chat/completions")
async def chat_completions(request: Request):
    """
    OpenAI-compatible chat completions.

    The last user message is used as the web search query (when search
    is configured); the answer comes from Gemini, or from OpenRouter for
    `openrouter:`-prefixed models. Upstream failures degrade to the
    no-answer text inside a normal 200 response.
    """
    try:
        body = await _read_body(request)
        chat_request, answer = await _pipeline(request).complete(body)
    except Exception as e:
        return _error_response(e)

    if chat_request.stream:
        return StreamingResponse(
            stream_completion(answer, chat_request.model),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )
    return build_completion(answer, chat_request.model)


@router.post("/ask")
async def ask(request: Request):
    """
    Legacy endpoint.

    `{"query": ...}` / `{"prompt": ...}` return `{"answer": ...}`;
    a body with `messages` returns a chat.completion object.
    """
    try:
        body = await _read_body(request)
        chat_request, answer = await _pipeline(request).complete(body)
    except Exception as e:
        return _error_response(e)

    if isinstance(body.get("messages"), list):
        return build_completion(answer, chat_request.model)
    return AskAnswer(answer=answer)
