"""
Test Suite: FastAPI Contract & Guardrail Validation

Validates the public HTTP contract of the search API without calling any
model endpoint or fetching any page. A FakeOrchestrator is injected through
FastAPI dependency overrides, so every response is deterministic.

Covered:
- Health endpoints (`/health`, `/api/health`)
- Empty-query rejection with the result-shaped 400 body
- Success responses keep the camelCase result shape
- Degraded pipeline results still return 200 with hasResults=false
- Unexpected orchestrator crashes return the result-shaped 500 body
- X-Request-ID propagation
"""

import pytest
from fastapi.testclient import TestClient

from models.search_result import SearchResult, SourceRecord
from server.app import create_app
from server.dependencies import get_orchestrator

pytestmark = pytest.mark.integration


# -------------------------------------------------------------------
# Fake orchestrator (keeps tests offline & deterministic)
# -------------------------------------------------------------------


class FakeOrchestrator:
    def __init__(self, result: SearchResult | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    async def search(self, query: str, language: str = "zh-TW", focus=None) -> SearchResult:
        self.calls.append((query, language, focus))
        if self.error:
            raise self.error
        return self.result


def _success_result(query: str = "香港天氣") -> SearchResult:
    return SearchResult(
        query=query,
        sources=[
            SourceRecord(
                title="HKO",
                url="https://www.hko.gov.hk",
                snippet="sunny",
                content="sunny all week",
                hostname="hko.gov.hk",
            )
        ],
        answer="晴天",
        follow_up_questions=["相關的最新發展趨勢？"],
        search_time=42,
        has_results=True,
    )


@pytest.fixture()
def fake_orchestrator():
    return FakeOrchestrator(result=_success_result())


@pytest.fixture()
def client(fake_orchestrator):
    app = create_app()
    app.dependency_overrides[get_orchestrator] = lambda: fake_orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# -------------------------------------------------------------------
# Health
# -------------------------------------------------------------------


@pytest.mark.parametrize("path", ["/health", "/api/health"])
def test_health(client, path):
    r = client.get(path)
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["version"] == "1.0.0"
    assert body["timestamp"].endswith("Z")


# -------------------------------------------------------------------
# /api/search
# -------------------------------------------------------------------


def test_search_success_shape(client, fake_orchestrator):
    r = client.post("/api/search", json={"query": "香港天氣", "language": "zh-HK", "focus": "travel"})

    assert r.status_code == 200
    assert r.json() == {
        "query": "香港天氣",
        "sources": [
            {
                "title": "HKO",
                "url": "https://www.hko.gov.hk",
                "snippet": "sunny",
                "content": "sunny all week",
                "hostname": "hko.gov.hk",
            }
        ],
        "answer": "晴天",
        "followUpQuestions": ["相關的最新發展趨勢？"],
        "searchTime": 42,
        "hasResults": True,
    }
    assert fake_orchestrator.calls == [("香港天氣", "zh-HK", "travel")]


def test_search_defaults_language_and_focus(client, fake_orchestrator):
    r = client.post("/api/search", json={"query": "  香港天氣  "})
    assert r.status_code == 200
    assert fake_orchestrator.calls == [("香港天氣", "zh-TW", "all")]


@pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": "   \n "}, {"query": None}])
def test_empty_query_rejected_with_result_shape(client, fake_orchestrator, payload):
    r = client.post("/api/search", json=payload)

    assert r.status_code == 400
    assert r.json() == {
        "error": "搜索查詢不能為空",
        "sources": [],
        "answer": "請輸入搜索查詢。",
        "followUpQuestions": [],
    }
    assert fake_orchestrator.calls == []


def test_null_query_is_400_not_validation_error(client, fake_orchestrator):
    r = client.post("/api/search", json={"query": None, "language": "zh-HK"})

    assert r.status_code == 400
    body = r.json()
    assert "detail" not in body
    assert body["error"] == "搜索查詢不能為空"
    assert body["sources"] == []
    assert body["followUpQuestions"] == []
    assert fake_orchestrator.calls == []


def test_degraded_result_is_still_200(client, fake_orchestrator):
    fake_orchestrator.result = SearchResult(
        query="q",
        answer="抱歉，處理您的請求時發生錯誤。 所有模型都失敗了",
        search_time=10,
        has_results=False,
    )

    r = client.post("/api/search", json={"query": "q"})

    assert r.status_code == 200
    body = r.json()
    assert body["hasResults"] is False
    assert body["followUpQuestions"] == []
    assert body["answer"].startswith("抱歉")


def test_unexpected_error_returns_500_with_result_shape(client, fake_orchestrator):
    fake_orchestrator.error = RuntimeError("boom")

    r = client.post("/api/search", json={"query": "q"})

    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "搜索服務暫時不可用"
    assert body["answer"] == "抱歉，搜索服務遇到了問題。請稍後再試。"
    assert body["sources"] == []
    assert body["followUpQuestions"] == []


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    r = client.get("/health")
    assert r.headers.get("X-Request-ID")
