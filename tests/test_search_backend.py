import asyncio
import json

import httpx
import pytest

from config.config import SearchConfig
from models.errors import TransportError
from tools.web.factory import create_search_backend
from tools.web.search_backend import TAVILY_SEARCH_URL, TavilySearchBackend


def _backend(handler) -> TavilySearchBackend:
    return TavilySearchBackend(
        "tvly-test", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


def _search(backend: TavilySearchBackend, query: str, max_results: int = 3):
    async def run():
        try:
            return await backend.search(query, max_results=max_results)
        finally:
            await backend._client.aclose()

    return asyncio.run(run())


def test_search_normalizes_hits():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "results": [
                    {"title": "HKO", "url": "https://www.hko.gov.hk", "content": "weather"},
                    {"title": "", "url": "https://b.example"},
                    {"title": "no url"},
                    {"title": "extra", "url": "https://c.example"},
                ]
            },
        )

    hits = _search(_backend(handler), "hk weather", max_results=3)

    assert seen["url"] == TAVILY_SEARCH_URL
    assert seen["body"]["query"] == "hk weather"
    assert seen["body"]["max_results"] == 3
    assert [h.url for h in hits] == ["https://www.hko.gov.hk", "https://b.example"]
    assert hits[1].title == "https://b.example"


def test_search_error_status_raises_transport_error():
    backend = _backend(lambda request: httpx.Response(401, json={"detail": "bad key"}))
    with pytest.raises(TransportError) as exc_info:
        _search(backend, "q")
    assert exc_info.value.status_code == 401


def test_backend_requires_api_key():
    with pytest.raises(ValueError):
        TavilySearchBackend("")


def test_factory_returns_none_without_key():
    assert create_search_backend(SearchConfig(fallback_models=("m1",))) is None


def test_factory_builds_backend_with_key():
    backend = create_search_backend(SearchConfig(fallback_models=("m1",), tavily_api_key="tvly-x"))
    assert isinstance(backend, TavilySearchBackend)
    asyncio.run(backend.aclose())
