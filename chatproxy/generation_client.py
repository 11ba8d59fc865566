"""Upstream text-generation client (Gemini / OpenRouter)."""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from .config import Config
from .errors import UpstreamUnavailable
from .providers import (
    ProviderTarget,
    UpstreamRequest,
    build_request,
    extract_answer,
)
from .retry import RetryPolicy, parse_body

logger = logging.getLogger(__name__)

RATE_LIMITED = 429


@dataclass
class Attempt:
    """Outcome of one upstream generation call."""
    status_code: int
    answer: str


class GenerationClient:
    """
    Async client for the upstream generation APIs.

    Handles:
    - Provider-specific request building (via providers.build_request)
    - Bounded fixed-delay retry on HTTP 429 with no extractable answer
    - Defensive parsing: bad JSON or missing fields yield the no-answer text
    """

    def __init__(
        self,
        cfg: Config,
        client: Optional[httpx.AsyncClient] = None,
        policy: Optional[RetryPolicy] = None,
    ):
        self.cfg = cfg
        self.client = client or httpx.AsyncClient()
        self.policy = policy or RetryPolicy(
            max_attempts=cfg.max_attempts,
            delay=cfg.retry_delay,
            retry_if=self._should_retry,
        )

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    def _should_retry(self, attempt: Attempt) -> bool:
        return attempt.status_code == RATE_LIMITED and attempt.answer == self.cfg.no_answer_text

    async def generate(
        self,
        target: ProviderTarget,
        prompt: str,
        messages: List[Any],
    ) -> str:
        """Generate an answer, falling back to the no-answer text on failure."""
        request = build_request(target, prompt, messages, self.cfg)
        logger.info(f"Generating: provider={target.kind.value}, model={target.model_name}")

        try:
            attempt = await self.policy.run(lambda: self._call(target, request))
        except UpstreamUnavailable as e:
            logger.error(f"{target.kind.value} API error: {e}")
            return self.cfg.no_answer_text

        if attempt.status_code >= 300:
            logger.warning(f"{target.kind.value} returned HTTP {attempt.status_code}")
        return attempt.answer

    async def _call(self, target: ProviderTarget, request: UpstreamRequest) -> Attempt:
        try:
            resp = await self.client.post(
                request.url,
                json=request.body,
                headers=request.headers,
                params=request.params,
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"{type(e).__name__}: {e}") from e

        parsed = parse_body(resp.text)
        if not parsed.ok:
            logger.error(f"Invalid JSON: {parsed.raw[:500]}")

        answer = extract_answer(target.kind, parsed.or_empty(), self.cfg.no_answer_text)
        return Attempt(status_code=resp.status_code, answer=answer)
