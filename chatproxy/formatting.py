"""
OpenAI-compatible response envelopes
"""

import json
import time
from typing import Any, Dict, Iterator, Optional

from .models import CompletionChoice, CompletionMessage, CompletionResponse


def completion_id() -> str:
    return f"chatcmpl-{int(time.time() * 1000)}"


def build_completion(answer: str, model: str) -> CompletionResponse:
    """Wrap an answer in a chat.completion object echoing the requested model"""
    return CompletionResponse(
        id=completion_id(),
        created=int(time.time()),
        model=model,
        choices=[CompletionChoice(message=CompletionMessage(content=answer))],
    )


def _sse_chunk(
    chat_id: str,
    created: int,
    model: str,
    delta: Dict[str, Any],
    finish_reason: Optional[str] = None,
) -> str:
    """Format a single chat.completion.chunk as SSE"""
    chunk = {
        "id": chat_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model,
        "choices": [{
            "index": 0,
            "delta": delta,
            "finish_reason": finish_reason,
        }],
    }
    return f"data: {json.dumps(chunk, ensure_ascii=False)}\n\n"


def stream_completion(answer: str, model: str) -> Iterator[str]:
    """Stream a finished answer in OpenAI SSE format"""
    chat_id = completion_id()
    created = int(time.time())

    yield _sse_chunk(chat_id, created, model, {"role": "assistant", "content": ""})
    yield _sse_chunk(chat_id, created, model, {"content": answer})
    yield _sse_chunk(chat_id, created, model, {}, "stop")
    yield "data: [DONE]\n\n"
