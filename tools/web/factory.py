"""Factories for the web retrieval collaborators."""

from config.config import SearchConfig
from utils.logger import get_logger

from .page_fetcher import PageTextFetcher
from .search_backend import TavilySearchBackend

logger = get_logger(__name__)


def create_page_fetcher(config: SearchConfig) -> PageTextFetcher:
    return PageTextFetcher(timeout_s=config.fetch_timeout_s)


def create_search_backend(config: SearchConfig) -> TavilySearchBackend | None:
    """
    Tavily backend when a key is configured, otherwise None.

    Without a backend, model-suggested search queries are not acted on.
    """
    if not config.tavily_api_key:
        logger.info("TAVILY_API_KEY not set; suggested search queries will be ignored")
        return None

    logger.info("Using Tavily to resolve suggested search queries")
    return TavilySearchBackend(api_key=config.tavily_api_key, timeout_s=config.fetch_timeout_s)
