"""
SearchOrchestrator - the retrieval-augmented search pipeline.

Key guarantees:
- Stages run strictly in order: discover -> fetch -> compose -> complete
- Model fallback is sequential over the configured list, never raced
- No exceptions bubble up from search(); failures become a SearchResult
  with has_results=False
- searchTime is measured on both the success and the failure path
"""

import asyncio
import time
import uuid

from api.base_client import BaseCompletionClient
from config.config import SearchConfig
from models.search_result import (
    FocusCategory,
    SearchQuery,
    SearchResult,
    SearchState,
    SourceRecord,
)
from orchestrator.fallback_manager import FallbackManager, FallbackPolicy
from orchestrator.prompt_builder import PromptBuilder
from orchestrator.result_formatter import ResultFormatter
from tools.web.content_fetcher import ContentFetcher, to_context_snippets
from tools.web.contracts import SourceSuggestion
from tools.web.page_fetcher import PageTextFetcher
from tools.web.search_backend import TavilySearchBackend
from tools.web.source_discovery import SourceDiscovery
from utils.logger import get_logger

logger = get_logger(__name__)

FAILURE_ANSWER_PREFIX = "抱歉，處理您的請求時發生錯誤。"
MAX_FAILURE_ANSWER_CHARS = 500


class SearchOrchestrator:
    def __init__(
        self,
        config: SearchConfig,
        completion_client: BaseCompletionClient,
        *,
        page_fetcher: PageTextFetcher | None = None,
        search_backend: TavilySearchBackend | None = None,
        prompt_builder: PromptBuilder | None = None,
        formatter: ResultFormatter | None = None,
        fallback_manager: FallbackManager | None = None,
    ):
        self.config = config
        self._client = completion_client
        self._page_fetcher = page_fetcher or PageTextFetcher(timeout_s=config.fetch_timeout_s)
        self._search_backend = search_backend
        self._discovery = SourceDiscovery(completion_client, config.discovery_model)
        self._content_fetcher = ContentFetcher(self._page_fetcher, max_urls=config.max_fetch_urls)
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._formatter = formatter or ResultFormatter(follow_up_limit=config.follow_up_limit)
        self._fallback_manager = fallback_manager or FallbackManager(
            FallbackPolicy(per_attempt_timeout_s=config.attempt_timeout_s)
        )

    @classmethod
    def from_config(cls, config: SearchConfig) -> "SearchOrchestrator":
        """Build the orchestrator with the transports selected by ``config``."""
        from api.factory import create_completion_client
        from tools.web.factory import create_page_fetcher, create_search_backend

        return cls(
            config,
            create_completion_client(config),
            page_fetcher=create_page_fetcher(config),
            search_backend=create_search_backend(config),
        )

    # ---------- public API ----------

    async def search(
        self, query: str, language: str = "zh-TW", focus: str | FocusCategory | None = None
    ) -> SearchResult:
        if focus is not None and not isinstance(focus, FocusCategory) and not FocusCategory.is_known(focus):
            logger.warning(f"Unknown focus '{focus}', using 'all'")
        return await self.perform_search(
            SearchQuery(query=query, language=language, focus=FocusCategory.parse(focus))
        )

    def search_sync(
        self, query: str, language: str = "zh-TW", focus: str | FocusCategory | None = None
    ) -> SearchResult:
        """Blocking wrapper for CLI use."""
        return asyncio.run(self.search(query, language, focus))

    async def perform_search(self, search_query: SearchQuery) -> SearchResult:
        request_id = str(uuid.uuid4())
        start_time = time.time()
        sources: list[SourceRecord] = []

        logger.info(
            "Search started",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "query": search_query.query,
                    "language": search_query.language,
                    "focus": search_query.focus.value,
                }
            },
        )

        try:
            self._transition(request_id, SearchState.DISCOVERING)
            suggestion = await self._discovery.suggest_sources(
                search_query.query, search_query.language
            )

            self._transition(request_id, SearchState.FETCHING)
            urls = await self._candidate_urls(request_id, suggestion)
            if urls:
                sources.extend(await self._content_fetcher.fetch_sources(urls))
            context_snippets = to_context_snippets(sources)
            logger.info(
                "Fetched web context",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "snippets": [{"url": s.url, "len": len(s.content)} for s in context_snippets],
                        "placeholders": len(sources) - len(context_snippets),
                    }
                },
            )

            self._transition(request_id, SearchState.COMPOSING)
            prompt = self._prompt_builder.build_prompt(
                search_query.query,
                search_query.language,
                search_query.focus,
                context_snippets,
            )

            # Completing(model_i) transitions are logged per attempt by the fallback manager
            outcome = await self._fallback_manager.run(
                self._client, list(self.config.fallback_models), prompt, request_id=request_id
            )

            elapsed_ms = _elapsed_ms(start_time)
            result = self._formatter.format(
                search_query.query, outcome.text, elapsed_ms, sources, search_query.language
            )
            self._transition(request_id, SearchState.DONE)
            logger.info(
                "Search completed",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": outcome.model_id,
                        "attempt": outcome.attempt_index + 1,
                        "search_time_ms": elapsed_ms,
                        "source_count": len(result.sources),
                    }
                },
            )
            return result

        except Exception as e:
            elapsed_ms = _elapsed_ms(start_time)
            self._transition(request_id, SearchState.FAILED)
            logger.error(
                f"Search failed: {e}",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "error_type": type(e).__name__,
                        "search_time_ms": elapsed_ms,
                        "source_count": len(sources),
                    }
                },
            )
            return self._failure_result(search_query.query, e, elapsed_ms, sources)

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._page_fetcher.aclose()
        if self._search_backend is not None:
            await self._search_backend.aclose()

    # ---------- helpers ----------

    async def _candidate_urls(self, request_id: str, suggestion: SourceSuggestion) -> list[str]:
        if suggestion.urls:
            return list(suggestion.urls)

        if not suggestion.search_queries:
            return []

        if self._search_backend is None:
            logger.info(
                "Suggested search queries ignored: no search backend configured",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "search_queries": list(suggestion.search_queries),
                    }
                },
            )
            return []

        search_query = suggestion.search_queries[0]
        try:
            hits = await self._search_backend.search(
                search_query, max_results=self.config.max_fetch_urls
            )
        except Exception as e:
            logger.warning(
                f"Search backend lookup failed: {e}",
                extra={"extra_fields": {"request_id": request_id, "search_query": search_query}},
            )
            return []
        return [hit.url for hit in hits]

    def _failure_result(
        self, query: str, error: Exception, elapsed_ms: int, sources: list[SourceRecord]
    ) -> SearchResult:
        answer = f"{FAILURE_ANSWER_PREFIX} {error}"[:MAX_FAILURE_ANSWER_CHARS]
        return SearchResult(
            query=query,
            sources=list(sources),
            answer=answer,
            follow_up_questions=[],
            search_time=elapsed_ms,
            has_results=False,
        )

    def _transition(self, request_id: str, state: SearchState) -> None:
        logger.debug(
            f"Search state -> {state.value}",
            extra={"extra_fields": {"request_id": request_id, "state": state.value}},
        )


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
