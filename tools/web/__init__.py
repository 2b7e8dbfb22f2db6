"""Web retrieval tools: source discovery, page fetching, search backends."""

from .content_fetcher import ContentFetcher, to_context_snippets
from .contracts import ContextSnippet, SourceSuggestion, WebSearchHit
from .page_fetcher import PageTextFetcher
from .source_discovery import SourceDiscovery

__all__ = [
    "ContentFetcher",
    "ContextSnippet",
    "PageTextFetcher",
    "SourceDiscovery",
    "SourceSuggestion",
    "WebSearchHit",
    "to_context_snippets",
]
