"""Shared utilities for FastAPI routes."""

from fastapi.responses import JSONResponse

from server.schemas.responses import ErrorResponseDTO

EMPTY_QUERY_ERROR = "搜索查詢不能為空"
EMPTY_QUERY_ANSWER = "請輸入搜索查詢。"
SERVICE_UNAVAILABLE_ERROR = "搜索服務暫時不可用"
SERVICE_UNAVAILABLE_ANSWER = "抱歉，搜索服務遇到了問題。請稍後再試。"


def error_response(status_code: int, error: str, answer: str) -> JSONResponse:
    """Error body keeps the result shape so the display layer can render it as-is."""
    body = ErrorResponseDTO(error=error, answer=answer)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def normalize_query(query: str | None) -> str:
    return (query or "").strip()
