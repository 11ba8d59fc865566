"""
Upstream provider routing.

A model identifier selects the upstream:

- ``openrouter:<name>`` goes to OpenRouter chat-completions
- ``gemini:<name>`` or a bare name (``models/gemini-2.5-flash``) goes to
  Gemini ``generateContent``

The identifier is resolved once into a ProviderTarget; request building
and answer extraction switch on its kind rather than on string prefixes.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import Config
from .errors import UnknownProvider

logger = logging.getLogger(__name__)

GEMINI_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class ProviderKind(str, Enum):
    """Supported upstream generation APIs."""
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


SUPPORTED_PREFIXES = tuple(f"{kind.value}:" for kind in ProviderKind)


@dataclass(frozen=True)
class ProviderTarget:
    """Resolved upstream and the model name it expects."""
    kind: ProviderKind
    model_name: str


@dataclass
class UpstreamRequest:
    """Provider-specific HTTP request description."""
    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


def resolve_target(model_identifier: Optional[str]) -> ProviderTarget:
    """Map a model identifier to its upstream."""
    if not model_identifier or not model_identifier.strip():
        raise UnknownProvider("", SUPPORTED_PREFIXES)

    prefix, sep, name = model_identifier.partition(":")
    if not sep:
        return ProviderTarget(ProviderKind.GEMINI, model_identifier)

    try:
        kind = ProviderKind(prefix)
    except ValueError:
        raise UnknownProvider(f"{prefix}:", SUPPORTED_PREFIXES) from None

    if not name:
        raise UnknownProvider(f"{prefix}:", SUPPORTED_PREFIXES)
    return ProviderTarget(kind, name)


def _gemini_model_path(model_name: str) -> str:
    # Names with a collection (models/..., tunedModels/...) are used verbatim
    return model_name if "/" in model_name else f"models/{model_name}"


def build_request(
    target: ProviderTarget,
    prompt: str,
    messages: List[Any],
    cfg: Config,
) -> UpstreamRequest:
    """Build the HTTP request for the target upstream."""
    if target.kind is ProviderKind.OPENROUTER:
        if cfg.openrouter_passthrough:
            payload_messages = list(messages)
        else:
            payload_messages = [{"role": "user", "content": prompt}]
        return UpstreamRequest(
            url=cfg.openrouter_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {cfg.openrouter_api_key}",
            },
            body={"model": target.model_name, "messages": payload_messages},
        )

    url = (
        f"{cfg.gemini_base_url}/{cfg.gemini_api_version}/"
        f"{_gemini_model_path(target.model_name)}:generateContent"
    )
    return UpstreamRequest(
        url=url,
        headers={"Content-Type": "application/json"},
        params={"key": cfg.gemini_api_key},
        body={
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "safetySettings": GEMINI_SAFETY_SETTINGS,
        },
    )


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def extract_answer(kind: ProviderKind, data: Any, sentinel: str) -> str:
    """Pull the answer text out of an upstream response, or the sentinel."""
    if kind is ProviderKind.OPENROUTER:
        text = _get(_get(_first(_get(data, "choices")), "message"), "content")
    else:
        content = _get(_first(_get(data, "candidates")), "content")
        text = _get(_first(_get(content, "parts")), "text")

    if isinstance(text, str) and text:
        return text
    return sentinel
