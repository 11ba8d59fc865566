"""
Chat Proxy

OpenAI-compatible chat endpoint in front of Gemini and OpenRouter,
with optional web search grounding.

Components:
- normalizer: Loose request bodies to ChatRequest
- search_client: Tavily search, degrading to a placeholder context
- prompt: Single-text prompt assembly
- providers: Model prefix routing and per-provider request/answer shapes
- generation_client: Upstream calls with bounded 429 retry
- formatting: chat.completion envelopes and SSE
- api: OpenAI-compatible endpoints
"""

__version__ = "0.1.0"
