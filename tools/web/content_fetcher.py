"""Turn candidate URLs into SourceRecords."""

from models.search_result import SourceRecord
from utils.logger import get_logger

from .contracts import ContextSnippet
from .page_fetcher import PageTextFetcher

logger = get_logger(__name__)

DEFAULT_MAX_URLS = 3


class ContentFetcher:
    """
    Fetches at most ``max_urls`` pages, one at a time and in input order.

    Every URL that is attempted yields either a real record (content and
    snippet truncated) or a failure placeholder with empty content. A page
    that loads but has no text is skipped. ``fetch_sources`` never raises.
    """

    def __init__(self, page_fetcher: PageTextFetcher, max_urls: int = DEFAULT_MAX_URLS):
        self._page_fetcher = page_fetcher
        self.max_urls = max_urls

    async def fetch_sources(self, urls: list[str]) -> list[SourceRecord]:
        urls_to_fetch = list(urls)[: self.max_urls]
        if len(urls) > len(urls_to_fetch):
            logger.debug(
                "Ignoring extra candidate URLs",
                extra={"extra_fields": {"received": len(urls), "limit": self.max_urls}},
            )

        records: list[SourceRecord] = []
        for url in urls_to_fetch:
            try:
                logger.info(f"Fetching content from URL: {url}")
                text = await self._page_fetcher.fetch_page_text(url)
            except Exception as e:
                logger.warning(
                    f"Failed to fetch content from {url}",
                    extra={"extra_fields": {"url": url, "error": str(e), "error_type": type(e).__name__}},
                )
                records.append(SourceRecord.failure_placeholder(url, str(e)))
                continue

            if not text:
                logger.info(f"No text content at {url}; skipping")
                continue
            records.append(SourceRecord.from_page(url, text))

        return records


def to_context_snippets(records: list[SourceRecord]) -> list[ContextSnippet]:
    """Context for the prompt: successfully fetched records only, order kept."""
    return [
        ContextSnippet(url=r.url, content=r.content, title=r.title)
        for r in records
        if not r.is_placeholder
    ]
