"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from models.search_result import SearchResult


class SourceDTO(BaseModel):
    title: str
    url: str
    snippet: str
    content: str
    hostname: str


class SearchResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    sources: list[SourceDTO] = Field(default_factory=list)
    answer: str
    follow_up_questions: list[str] = Field(default_factory=list, alias="followUpQuestions")
    search_time: int = Field(alias="searchTime")
    has_results: bool = Field(alias="hasResults")

    @classmethod
    def from_search_result(cls, result: SearchResult) -> "SearchResponseDTO":
        return cls.model_validate(result.to_dict())


class ErrorResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    sources: list[SourceDTO] = Field(default_factory=list)
    answer: str
    follow_up_questions: list[str] = Field(default_factory=list, alias="followUpQuestions")


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str
