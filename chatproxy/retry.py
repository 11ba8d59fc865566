"""Bounded retry policy and defensive body parsing."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParsedBody:
    """
    Outcome of parsing an upstream body.

    `data` holds the decoded JSON when parsing succeeded; `raw` always
    keeps the original text so callers can log what they received.
    """
    data: Optional[Any]
    raw: str

    @property
    def ok(self) -> bool:
        return self.data is not None

    def or_empty(self) -> Any:
        """Decoded JSON, or an empty dict when the body did not parse."""
        return self.data if self.ok else {}


def parse_body(text: str) -> ParsedBody:
    """Parse text as JSON without raising."""
    try:
        return ParsedBody(data=json.loads(text), raw=text)
    except (json.JSONDecodeError, TypeError):
        return ParsedBody(data=None, raw=text)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-delay bounded retry.

    `retry_if` inspects each attempt's result; the attempt is repeated
    while it returns True and attempts remain. The last result is
    returned either way.
    """
    max_attempts: int = 1
    delay: float = 0.0
    retry_if: Callable[[Any], bool] = lambda result: False

    async def run(self, attempt: Callable[[], Awaitable[T]]) -> T:
        attempts = max(1, self.max_attempts)
        for n in range(1, attempts + 1):
            result = await attempt()
            if n == attempts or not self.retry_if(result):
                return result
            logger.info(f"Retrying in {self.delay}s (attempt {n + 1}/{attempts})")
            await asyncio.sleep(self.delay)
        return result
