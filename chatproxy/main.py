"""
Chat Proxy - Main Entry Point

OpenAI-compatible API server that answers chat requests with Gemini
(or OpenRouter for `openrouter:`-prefixed models), optionally grounding
the prompt in Tavily web search results.

Usage:
    python -m chatproxy.main

Environment Variables:
    HOST                - Server host (default: 0.0.0.0)
    PORT                - Server port (default: 3000)
    GEMINI_API_KEY      - Gemini API key
    GEMINI_MODEL        - Default model (default: models/gemini-2.5-flash-lite)
    GEMINI_API_VERSION  - Gemini API surface (default: v1beta)
    OPENROUTER_API_KEY  - OpenRouter API key
    TAVILY_API_KEY      - Tavily key; search is disabled when unset
    GEN_MAX_ATTEMPTS    - Generation attempts on HTTP 429 (default: 5)
    GEN_RETRY_DELAY     - Seconds between attempts (default: 2.0)
    MODELS              - Comma-separated model ids listed on /v1/models
    DEBUG               - Enable debug logging
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router as api_router
from .config import Config, config
from .generation_client import GenerationClient
from .pipeline import ChatPipeline
from .search_client import SearchClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def create_app(
    cfg: Optional[Config] = None,
    search: Optional[SearchClient] = None,
    generation: Optional[GenerationClient] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    The ChatPipeline and its HTTP clients are created at startup and
    closed at shutdown, so importing this module opens no connections.
    """
    cfg = cfg or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown lifecycle."""

        # Startup
        pipeline = ChatPipeline(
            cfg,
            search or SearchClient(cfg),
            generation or GenerationClient(cfg),
        )
        app.state.pipeline = pipeline

        logger.info("=" * 60)
        logger.info("Chat Proxy Starting")
        logger.info("=" * 60)
        logger.info(f"Default model: {cfg.gemini_model}")
        logger.info(f"Gemini API: {cfg.gemini_base_url}/{cfg.gemini_api_version}")
        logger.info(f"Gemini key: {'set' if cfg.gemini_api_key else 'MISSING'}")
        logger.info(f"OpenRouter key: {'set' if cfg.openrouter_api_key else 'not set'}")
        if cfg.search_enabled:
            logger.info(f"Web search: Tavily (max {pipeline.search.max_results} results)")
        else:
            logger.warning("No TAVILY_API_KEY configured - web search disabled")
        logger.info(f"Retry: {cfg.max_attempts} attempts, {cfg.retry_delay}s delay on HTTP 429")
        logger.info("-" * 60)
        logger.info(f"Server ready at http://{cfg.host}:{cfg.port}")
        logger.info(f"OpenAI endpoint: http://{cfg.host}:{cfg.port}/v1/chat/completions")
        logger.info("=" * 60)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await pipeline.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Chat Proxy",
        description=(
            "OpenAI-compatible API in front of Gemini and OpenRouter, "
            "with optional Tavily web search grounding."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "model": cfg.gemini_model,
            "search_enabled": cfg.search_enabled,
            "providers": {
                "gemini": bool(cfg.gemini_api_key),
                "openrouter": bool(cfg.openrouter_api_key),
            },
        }

    return app


app = create_app()


def main():
    """Run the proxy server."""
    uvicorn.run(
        "chatproxy.main:app",
        host=config.host,
        port=config.port,
        reload=False,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
