import pytest

from models.search_result import FocusCategory, SearchQuery, SearchResult, SourceRecord
from tools.web.contracts import SourceSuggestion
from utils.url_utils import extract_hostname


@pytest.mark.parametrize(
    "url, hostname",
    [
        ("https://www.example.com/path", "example.com"),
        ("http://news.gov.hk:8080/a?b=c", "news.gov.hk"),
        ("https://wwwexample.com", "wwwexample.com"),
        ("not a url", "unknown"),
        ("", "unknown"),
    ],
)
def test_extract_hostname(url, hostname):
    assert extract_hostname(url) == hostname


@pytest.mark.parametrize(
    "value, expected",
    [
        ("news", FocusCategory.NEWS),
        (" Finance ", FocusCategory.FINANCE),
        ("sports", FocusCategory.ALL),
        (None, FocusCategory.ALL),
        (FocusCategory.TRAVEL, FocusCategory.TRAVEL),
    ],
)
def test_focus_parse(value, expected):
    assert FocusCategory.parse(value) == expected


def test_search_query_normalizes_focus():
    assert SearchQuery("q", focus="shopping").focus is FocusCategory.SHOPPING
    assert SearchQuery("q", focus="unknown").focus is FocusCategory.ALL


def test_failure_placeholder_shape():
    record = SourceRecord.failure_placeholder("https://bad.example/x", "x" * 500)
    assert record.title == "Failed to load: https://bad.example/x"
    assert record.content == ""
    assert len(record.snippet) == 200
    assert record.hostname == "bad.example"


def test_search_result_defaults():
    result = SearchResult(query="q")
    assert result.to_dict() == {
        "query": "q",
        "sources": [],
        "answer": "",
        "followUpQuestions": [],
        "searchTime": 0,
        "hasResults": False,
    }


def test_suggestion_lists_capped_at_five():
    suggestion = SourceSuggestion(search_queries=[str(i) for i in range(7)], urls=["u"])
    assert len(suggestion.search_queries) == 5
    assert suggestion.urls == ("u",)
    assert not suggestion.is_empty
