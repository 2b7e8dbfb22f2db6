"""Data contracts for the web retrieval stages."""

from dataclasses import dataclass

MAX_SUGGESTIONS = 5


@dataclass(frozen=True)
class SourceSuggestion:
    """Model-proposed search queries and/or URLs. Lives only for one pipeline run."""

    search_queries: tuple[str, ...] = ()
    urls: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "search_queries", tuple(self.search_queries)[:MAX_SUGGESTIONS])
        object.__setattr__(self, "urls", tuple(self.urls)[:MAX_SUGGESTIONS])

    @property
    def is_empty(self) -> bool:
        return not self.search_queries and not self.urls


@dataclass(frozen=True)
class ContextSnippet:
    """Fetched page text handed to the prompt builder."""

    url: str
    content: str
    title: str | None = None


@dataclass(frozen=True)
class WebSearchHit:
    """Result from a search backend."""

    title: str
    url: str
    snippet: str = ""
