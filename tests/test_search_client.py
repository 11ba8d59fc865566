import asyncio

import httpx

from chatproxy.models import SearchContext, SearchResult
from chatproxy.search_client import SearchClient

from conftest import TAVILY_HOST, json_response, make_config, request_json

PLACEHOLDER = "(no search results)"


def _search(upstream, **cfg_overrides) -> SearchContext:
    cfg = make_config(**cfg_overrides)
    client = SearchClient(cfg, client=upstream.client())
    return asyncio.run(client.search("capital of France"))


def test_no_key_returns_placeholder_without_calling(upstream):
    context = _search(upstream, tavily_api_key="")

    assert context.render(PLACEHOLDER) == PLACEHOLDER
    assert upstream.requests == []


def test_results_are_rendered(upstream):
    upstream.add(TAVILY_HOST, json_response(200, {
        "results": [
            {"title": "Paris", "content": "Capital of France"},
            {"title": "France", "content": "Country in Europe", "url": "https://example.org"},
        ]
    }))

    context = _search(upstream, tavily_api_key="tvly-test")

    assert context.results[0] == SearchResult(title="Paris", content="Capital of France")
    assert context.render(PLACEHOLDER) == "- Paris\nCapital of France\n\n- France\nCountry in Europe"

    [request] = upstream.calls(TAVILY_HOST)
    assert request.headers["Authorization"] == "Bearer tvly-test"
    assert request_json(request) == {"query": "capital of France", "max_results": 3}


def test_malformed_entries_are_skipped(upstream):
    upstream.add(TAVILY_HOST, json_response(200, {
        "results": [{"title": "Only title"}, "junk", {"title": "Paris", "content": "Capital of France"}]
    }))

    context = _search(upstream, tavily_api_key="tvly-test")

    assert context.render(PLACEHOLDER) == "- Paris\nCapital of France"


def test_empty_results_fall_back_to_placeholder(upstream):
    upstream.add(TAVILY_HOST, json_response(200, {"results": []}))

    assert _search(upstream, tavily_api_key="tvly-test").render(PLACEHOLDER) == PLACEHOLDER


def test_invalid_json_falls_back_to_placeholder(upstream):
    upstream.add(TAVILY_HOST, httpx.Response(502, text="<html>Bad Gateway</html>"))

    assert _search(upstream, tavily_api_key="tvly-test").render(PLACEHOLDER) == PLACEHOLDER


def test_transport_error_is_not_retried(upstream):
    upstream.add(TAVILY_HOST, httpx.ReadTimeout("timed out"))

    context = _search(upstream, tavily_api_key="tvly-test")

    assert context.render(PLACEHOLDER) == PLACEHOLDER
    assert len(upstream.calls(TAVILY_HOST)) == 1


def test_results_are_capped_at_three(upstream):
    upstream.add(TAVILY_HOST, json_response(200, {
        "results": [{"title": f"t{i}", "content": f"c{i}"} for i in range(6)]
    }))

    context = _search(upstream, tavily_api_key="tvly-test", search_max_results=10)

    assert [r.title for r in context.results] == ["t0", "t1", "t2"]
    [request] = upstream.calls(TAVILY_HOST)
    assert request_json(request)["max_results"] == 3


def test_smaller_configured_limit_is_honoured(upstream):
    upstream.add(TAVILY_HOST, json_response(200, {
        "results": [{"title": f"t{i}", "content": f"c{i}"} for i in range(3)]
    }))

    context = _search(upstream, tavily_api_key="tvly-test", search_max_results=1)

    assert context.render(PLACEHOLDER) == "- t0\nc0"
    assert request_json(upstream.calls(TAVILY_HOST)[0])["max_results"] == 1
