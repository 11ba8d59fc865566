"""
Request normalization.

Inbound bodies arrive in several historical shapes:

- OpenAI style ``{"model": ..., "messages": [{"role": ..., "content": ...}]}``
  where ``content`` is either a string or a list of ``{"text": ...}`` parts
- legacy ``{"query": "..."}`` or ``{"prompt": "..."}``

All of them are reduced to a ``ChatRequest`` here, before anything else in
the pipeline looks at the body.
"""

import logging
from typing import Any, Dict, List, Optional

from .errors import InvalidInput
from .models import ROLES, ChatMessage, ChatRequest

logger = logging.getLogger(__name__)

ACCEPTED_KEYS = ("messages", "query", "prompt")


def flatten_content(content: Any) -> str:
    """Collapse string or list-of-parts content into plain text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, str):
                texts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                texts.append(part["text"])
        return "".join(texts)
    return ""


def _coerce_messages(raw: List[Any]) -> List[ChatMessage]:
    messages = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        role = item.get("role")
        if role not in ROLES:
            logger.debug(f"Dropping message with unsupported role: {role!r}")
            continue
        content = flatten_content(item.get("content"))
        if not content:
            continue
        messages.append(ChatMessage(role=role, content=content))
    return messages


def _fallback_text(body: Dict[str, Any]) -> Optional[str]:
    for key in ("query", "prompt"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def normalize_request(body: Any, default_model: str) -> ChatRequest:
    """
    Build a ChatRequest from a loosely-typed request body.

    Raises:
        InvalidInput: when no usable text can be derived, or when the
            conversation has no user message.
    """
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")

    raw_messages = body.get("messages")
    if isinstance(raw_messages, list):
        messages = _coerce_messages(raw_messages)
    else:
        text = _fallback_text(body)
        messages = [ChatMessage(role="user", content=text)] if text else []
        raw_messages = [m.model_dump() for m in messages]

    if not messages:
        raise InvalidInput(
            f"No messages found (expected one of: {', '.join(ACCEPTED_KEYS)})"
        )
    if last_user_text(messages) is None:
        raise InvalidInput("No user text found")

    model = body.get("model")
    if not isinstance(model, str) or not model.strip():
        model = default_model

    return ChatRequest(
        model=model,
        messages=messages,
        raw_messages=raw_messages,
        stream=body.get("stream") is True,
    )


def last_user_text(messages: List[ChatMessage]) -> Optional[str]:
    """Get the last user message from message history"""
    for msg in reversed(messages):
        if msg.role == "user":
            return msg.content
    return None


def system_prompt(messages: List[ChatMessage]) -> str:
    """First system message content, or an empty string"""
    for msg in messages:
        if msg.role == "system":
            return msg.content
    return ""
