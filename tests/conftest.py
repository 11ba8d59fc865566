import json
from contextlib import ExitStack
from typing import Any, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from chatproxy.config import Config
from chatproxy.generation_client import GenerationClient
from chatproxy.main import create_app
from chatproxy.search_client import SearchClient

GEMINI_HOST = "generativelanguage.googleapis.com"
OPENROUTER_HOST = "openrouter.ai"
TAVILY_HOST = "api.tavily.com"

DEFAULT_MODEL = "models/gemini-2.5-flash-lite"


def make_config(**overrides) -> Config:
    """Config with fake credentials, independent of the process environment."""
    values = dict(
        host="127.0.0.1",
        port=3000,
        debug=False,
        gemini_api_key="test-gemini-key",
        gemini_model=DEFAULT_MODEL,
        gemini_base_url="https://generativelanguage.googleapis.com",
        gemini_api_version="v1beta",
        openrouter_api_key="test-openrouter-key",
        openrouter_url="https://openrouter.ai/api/v1/chat/completions",
        openrouter_passthrough=True,
        tavily_api_key="",
        tavily_url="https://api.tavily.com/search",
        search_max_results=3,
        max_attempts=5,
        retry_delay=0.0,
        extra_models=[],
        no_answer_text="(no answer)",
        no_context_text="(no search results)",
    )
    values.update(overrides)
    return Config(**values)


def gemini_reply(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def openrouter_reply(text: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class FakeUpstream:
    """
    Canned responses per upstream host, recording every request.

    Responses queued for a host are served in order; the last one is
    repeated once the queue runs down to it.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: Dict[str, List[Any]] = {}

    def add(self, host: str, *responses):
        self._responses.setdefault(host, []).extend(responses)

    def calls(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._responses.get(request.url.host)
        if not queue:
            raise AssertionError(f"Unexpected request to {request.url}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def json_response(status_code: int, data: Any) -> httpx.Response:
    return httpx.Response(status_code, text=json.dumps(data))


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def cfg():
    return make_config()


@pytest.fixture
def make_client(upstream):
    """
    Build started TestClients whose outbound HTTP goes to the fake upstream.

    Each client runs the app lifespan and is shut down at teardown.
    """
    with ExitStack() as stack:

        def _make(cfg: Config = None, generation: GenerationClient = None) -> TestClient:
            cfg = cfg or make_config()
            app = create_app(
                cfg,
                search=SearchClient(cfg, client=upstream.client()),
                generation=generation or GenerationClient(cfg, client=upstream.client()),
            )
            return stack.enter_context(TestClient(app))

        yield _make
