"""Retrieve a web page and reduce it to readable text."""

import re

import httpx
from bs4 import BeautifulSoup

from models.errors import TransportError
from utils.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; SearchAssistantBot/1.0)"
REMOVE_TAGS = ["script", "style", "noscript", "nav", "footer", "header", "iframe", "svg", "img"]
MAX_PAGE_CHARS = 20000


def html_to_text(html: str) -> str:
    """Visible text of an HTML document, whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(REMOVE_TAGS):
        element.decompose()
    text = soup.get_text(separator=" ", strip=True)
    return re.sub(r"\s+", " ", text).strip()


class PageTextFetcher:
    """
    ``fetch_page_text(url) -> str`` backed by httpx and BeautifulSoup.

    Raises ``TransportError`` for network failures and non-2xx statuses; the
    content fetcher turns those into placeholder records.
    """

    def __init__(
        self,
        *,
        timeout_s: float = 10.0,
        max_chars: int = MAX_PAGE_CHARS,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.timeout_s = timeout_s
        self.max_chars = max_chars
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout_s,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def fetch_page_text(self, url: str) -> str:
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out after {self.timeout_s}s", url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}", url=url) from e

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        content_type = response.headers.get("content-type", "").lower()
        if "html" in content_type or response.text.lstrip()[:1] == "<":
            text = html_to_text(response.text)
        else:
            text = response.text.strip()

        logger.debug(
            "Fetched page",
            extra={"extra_fields": {"url": url, "status": response.status_code, "chars": len(text)}},
        )
        return text[: self.max_chars]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
