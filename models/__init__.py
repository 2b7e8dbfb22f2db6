"""
Models package for search queries, source records and results.
"""

from .errors import (
    ExhaustionError,
    ParseError,
    SearchServiceError,
    ShapeError,
    TransportError,
)
from .search_result import (
    Complexity,
    FocusCategory,
    LanguageVariant,
    SearchQuery,
    SearchResult,
    SearchState,
    SourceRecord,
)

__all__ = [
    "Complexity",
    "ExhaustionError",
    "FocusCategory",
    "LanguageVariant",
    "ParseError",
    "SearchQuery",
    "SearchResult",
    "SearchServiceError",
    "SearchState",
    "ShapeError",
    "SourceRecord",
    "TransportError",
]
