"""
Per-request chat pipeline.

normalize -> search -> assemble prompt -> resolve provider -> generate

Each request runs its outbound calls strictly in sequence (the search
result feeds the prompt). Nothing is shared between requests except the
HTTP clients.
"""

import logging
from typing import Any, Tuple

from .config import Config
from .generation_client import GenerationClient
from .models import ChatRequest
from .normalizer import last_user_text, normalize_request, system_prompt
from .prompt import assemble_prompt
from .providers import resolve_target
from .search_client import SearchClient

logger = logging.getLogger(__name__)


class ChatPipeline:
    """Runs one chat request from raw body to answer text."""

    def __init__(self, cfg: Config, search: SearchClient, generation: GenerationClient):
        self.cfg = cfg
        self.search = search
        self.generation = generation

    async def close(self):
        await self.search.close()
        await self.generation.close()

    async def answer(self, request: ChatRequest) -> str:
        """Produce the answer text for a normalized request."""
        target = resolve_target(request.model)

        query = last_user_text(request.messages)
        context = await self.search.search(query)

        prompt = assemble_prompt(
            system_prompt(request.messages),
            context.render(self.cfg.no_context_text),
            request.messages,
        )
        logger.debug(f"Assembled prompt ({len(prompt)} chars, {len(context.results)} search results)")

        return await self.generation.generate(target, prompt, request.raw_messages)

    async def complete(self, body: Any) -> Tuple[ChatRequest, str]:
        """Normalize a raw body and answer it."""
        request = normalize_request(body, self.cfg.gemini_model)
        logger.info(f"Chat completion: model={request.model}, messages={len(request.messages)}")
        return request, await self.answer(request)
