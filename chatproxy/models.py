"""Data models for the chat proxy."""

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field


# ============================================================================
# OpenAI-Compatible Request/Response Models
# ============================================================================

Role = Literal["system", "user", "assistant"]
ROLES = ("system", "user", "assistant")


class ChatMessage(BaseModel):
    """OpenAI chat message format."""
    role: Role
    content: str


class ChatRequest(BaseModel):
    """Normalized chat request."""
    model: Optional[str] = None
    messages: List[ChatMessage]
    # Messages exactly as received, for upstreams that take structured turns
    raw_messages: List[Any] = Field(default_factory=list)
    stream: bool = False


class CompletionMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class CompletionChoice(BaseModel):
    index: int = 0
    message: CompletionMessage
    finish_reason: str = "stop"


class CompletionResponse(BaseModel):
    """OpenAI chat completion response."""
    id: str
    object: Literal["chat.completion"] = "chat.completion"
    created: int
    model: str
    choices: List[CompletionChoice]


class ModelInfo(BaseModel):
    """OpenAI model info."""
    id: str
    object: str = "model"
    created: int
    owned_by: str


class ModelList(BaseModel):
    object: str = "list"
    data: List[ModelInfo]


class AskAnswer(BaseModel):
    """Legacy /ask response."""
    answer: str


# ============================================================================
# Search Context
# ============================================================================

@dataclass(frozen=True)
class SearchResult:
    """Single web search hit."""
    title: str
    content: str


@dataclass(frozen=True)
class SearchContext:
    """Ordered search hits rendered into the generation prompt."""
    results: List[SearchResult] = field(default_factory=list)

    def render(self, placeholder: str) -> str:
        if not self.results:
            return placeholder
        return "\n\n".join(f"- {r.title}\n{r.content}" for r in self.results)
