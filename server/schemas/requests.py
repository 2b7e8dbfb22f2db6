"""Pydantic request models for FastAPI endpoints."""

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    # Empty queries are rejected by the route with the result-shaped 400 body,
    # not by pydantic's 422.
    query: str | None = None
    language: str = Field(default="zh-TW", max_length=16)
    focus: str = Field(default="all", max_length=32)
