"""Proxy configuration."""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Configuration loaded from environment variables."""

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    debug: bool = field(default_factory=lambda: bool(os.getenv("DEBUG")))

    # Gemini
    gemini_api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "models/gemini-2.5-flash-lite"))
    gemini_base_url: str = field(default_factory=lambda:
        os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com").rstrip("/"))
    gemini_api_version: str = field(default_factory=lambda: os.getenv("GEMINI_API_VERSION", "v1beta"))

    # OpenRouter
    openrouter_api_key: str = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY", ""))
    openrouter_url: str = field(default_factory=lambda:
        os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions"))
    openrouter_passthrough: bool = field(default_factory=lambda: _env_flag("OPENROUTER_PASSTHROUGH", "true"))

    # Tavily search
    tavily_api_key: str = field(default_factory=lambda: os.getenv("TAVILY_API_KEY", ""))
    tavily_url: str = field(default_factory=lambda: os.getenv("TAVILY_URL", "https://api.tavily.com/search"))
    search_max_results: int = field(default_factory=lambda: int(os.getenv("SEARCH_MAX_RESULTS", "3")))

    # Generation retry
    max_attempts: int = field(default_factory=lambda: int(os.getenv("GEN_MAX_ATTEMPTS", "5")))
    retry_delay: float = field(default_factory=lambda: float(os.getenv("GEN_RETRY_DELAY", "2.0")))

    # Models advertised on /v1/models, in addition to the default
    extra_models: List[str] = field(default_factory=lambda:
        [m.strip() for m in os.getenv("MODELS", "").split(",") if m.strip()])

    # Placeholders
    no_answer_text: str = field(default_factory=lambda: os.getenv("NO_ANSWER_TEXT", "(no answer)"))
    no_context_text: str = field(default_factory=lambda: os.getenv("NO_CONTEXT_TEXT", "(no search results)"))

    @property
    def search_enabled(self) -> bool:
        """Web search runs only when a Tavily key is configured."""
        return bool(self.tavily_api_key)

    @property
    def models(self) -> List[str]:
        """Default model first, then configured extras, without duplicates."""
        ordered = [self.gemini_model] + list(self.extra_models)
        return list(dict.fromkeys(ordered))


# Global config instance
config = Config()
