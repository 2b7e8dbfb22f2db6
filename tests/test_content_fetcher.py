import asyncio

import httpx
import pytest

from models.errors import TransportError
from models.search_result import MAX_CONTENT_CHARS, MAX_SNIPPET_CHARS
from tools.web.content_fetcher import ContentFetcher, to_context_snippets
from tools.web.page_fetcher import PageTextFetcher, html_to_text


def _fetch(fetcher: ContentFetcher, urls):
    return asyncio.run(fetcher.fetch_sources(urls))


def test_long_page_truncated_to_content_and_snippet_limits(static_fetcher):
    url = "https://a.example/x"
    fetcher = ContentFetcher(static_fetcher({url: "字" * 3000}))

    [record] = _fetch(fetcher, [url])

    assert len(record.content) == MAX_CONTENT_CHARS == 1500
    assert len(record.snippet) == MAX_SNIPPET_CHARS == 200
    assert record.title == url
    assert record.hostname == "a.example"


def test_only_first_three_urls_fetched_in_order(static_fetcher):
    urls = [f"https://s{i}.example/page" for i in range(5)]
    pages = static_fetcher({u: f"text {i}" for i, u in enumerate(urls)})

    records = _fetch(ContentFetcher(pages), urls)

    assert pages.requested == urls[:3]
    assert [r.url for r in records] == urls[:3]


def test_failed_url_becomes_placeholder(static_fetcher):
    ok_url, bad_url = "https://www.ok.example/a", "https://bad.example/b"
    pages = static_fetcher({ok_url: "hello", bad_url: TransportError("HTTP error! status: 404")})

    ok, failed = _fetch(ContentFetcher(pages), [ok_url, bad_url])

    assert ok.content == "hello"
    assert ok.hostname == "ok.example"
    assert failed.title == f"Failed to load: {bad_url}"
    assert failed.content == ""
    assert failed.snippet.startswith("Could not retrieve content from this URL.")
    assert failed.is_placeholder


def test_empty_page_is_skipped(static_fetcher):
    records = _fetch(ContentFetcher(static_fetcher({"https://a.example": ""})), ["https://a.example"])
    assert records == []


def test_unexpected_errors_never_escape(static_fetcher):
    pages = static_fetcher({"https://a.example": RuntimeError("boom")})
    [record] = _fetch(ContentFetcher(pages), ["https://a.example"])
    assert record.is_placeholder


def test_context_snippets_exclude_placeholders(static_fetcher):
    pages = static_fetcher({"https://a.example": "alpha", "https://b.example": TransportError("down")})
    records = _fetch(ContentFetcher(pages), ["https://a.example", "https://b.example"])

    snippets = to_context_snippets(records)

    assert [s.url for s in snippets] == ["https://a.example"]
    assert snippets[0].content == "alpha"


def test_html_to_text_drops_scripts_and_chrome():
    html = """
    <html><head><style>body {}</style><script>var x = 1;</script></head>
    <body><nav>menu</nav><h1>Title</h1><p>First   paragraph.</p><footer>foot</footer></body></html>
    """
    assert html_to_text(html) == "Title First paragraph."


def _page_fetcher(handler) -> PageTextFetcher:
    return PageTextFetcher(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _fetch_text(fetcher: PageTextFetcher, url: str) -> str:
    async def run():
        try:
            return await fetcher.fetch_page_text(url)
        finally:
            await fetcher._client.aclose()

    return asyncio.run(run())


def test_page_fetcher_extracts_html_text():
    fetcher = _page_fetcher(
        lambda request: httpx.Response(
            200, text="<p>Hello <b>HK</b></p>", headers={"content-type": "text/html; charset=utf-8"}
        )
    )
    assert _fetch_text(fetcher, "https://a.example") == "Hello HK"


def test_page_fetcher_keeps_plain_text():
    fetcher = _page_fetcher(
        lambda request: httpx.Response(200, text="  plain text  ", headers={"content-type": "text/plain"})
    )
    assert _fetch_text(fetcher, "https://a.example") == "plain text"


def test_page_fetcher_raises_on_error_status():
    fetcher = _page_fetcher(lambda request: httpx.Response(404, text="missing"))
    with pytest.raises(TransportError) as exc_info:
        _fetch_text(fetcher, "https://a.example/missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.url == "https://a.example/missing"
