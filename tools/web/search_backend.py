"""Resolve model-suggested search queries into candidate URLs via Tavily."""

from __future__ import annotations

from typing import Any

import httpx

from models.errors import ShapeError, TransportError
from utils.logger import get_logger

from .contracts import WebSearchHit

logger = get_logger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
DEFAULT_MAX_RESULTS = 3
DEFAULT_TIMEOUT_S = 8.0


def _normalize_hits(payload: dict[str, Any], max_results: int) -> list[WebSearchHit]:
    hits: list[WebSearchHit] = []
    for item in (payload.get("results") or [])[:max_results]:
        if not isinstance(item, dict):
            continue
        url = str(item.get("url") or "").strip()
        if not url:
            continue
        title = str(item.get("title") or "").strip() or url
        hits.append(WebSearchHit(title=title, url=url, snippet=str(item.get("content") or "")))
    return hits


class TavilySearchBackend:
    """Thin async client for the Tavily search REST API."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise ValueError("TAVILY_API_KEY not set")
        self._api_key = api_key
        self.timeout_s = timeout_s
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)

    async def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[WebSearchHit]:
        request_payload = {
            "api_key": self._api_key,
            "query": query,
            "search_depth": "basic",
            "include_answer": False,
            "max_results": max(1, min(int(max_results), 10)),
        }

        try:
            response = await self._client.post(TAVILY_SEARCH_URL, json=request_payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Tavily returned {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Tavily lookup failed: {e}") from e

        try:
            payload = response.json() if response.content else {}
        except ValueError as e:
            raise ShapeError("Tavily returned a non-JSON body") from e
        if not isinstance(payload, dict):
            raise ShapeError("Tavily returned an unexpected body", body=payload)

        hits = _normalize_hits(payload, max_results)
        logger.info(f"Tavily returned {len(hits)} results for '{query}'")
        return hits

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
