"""Tavily web search client."""

import logging
from typing import Any, List, Optional

import httpx

from .config import Config
from .errors import UpstreamUnavailable
from .models import SearchContext, SearchResult
from .retry import parse_body

logger = logging.getLogger(__name__)

MAX_RESULTS = 3


class SearchClient:
    """
    Async client for the Tavily search API.

    Search is optional: without an API key, or on any failure, an empty
    SearchContext is returned. Failures are never retried.
    """

    def __init__(self, cfg: Config, client: Optional[httpx.AsyncClient] = None):
        self.cfg = cfg
        self.client = client or httpx.AsyncClient()

    @property
    def max_results(self) -> int:
        """Configured result count, never above MAX_RESULTS."""
        return max(1, min(self.cfg.search_max_results, MAX_RESULTS))

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def search(self, query: str) -> SearchContext:
        """Search the web for `query` and return the top hits."""
        if not self.cfg.search_enabled:
            return SearchContext()

        try:
            data = await self._post(query)
        except UpstreamUnavailable as e:
            logger.warning(f"Tavily search error: {e}")
            return SearchContext()

        results = _parse_results(data)[: self.max_results]
        logger.debug(f"Search returned {len(results)} results")
        return SearchContext(results=results)

    async def _post(self, query: str) -> Any:
        try:
            resp = await self.client.post(
                self.cfg.tavily_url,
                json={"query": query, "max_results": self.max_results},
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.cfg.tavily_api_key}",
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"{type(e).__name__}: {e}") from e

        parsed = parse_body(resp.text)
        if not parsed.ok:
            raise UpstreamUnavailable(f"Invalid JSON (status {resp.status_code}): {parsed.raw[:500]}")
        return parsed.data


def _parse_results(data: Any) -> List[SearchResult]:
    raw = data.get("results") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        return []

    results = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        title, content = item.get("title"), item.get("content")
        if isinstance(title, str) and isinstance(content, str):
            results.append(SearchResult(title=title, content=content))
    return results
