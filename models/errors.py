"""Error taxonomy of the search pipeline.

Only ``ExhaustionError`` (or an unexpected exception) ever reaches the
orchestrator's outer handler, and even then it is turned into a degraded
``SearchResult`` instead of propagating to the caller.
"""

from typing import Any


class SearchServiceError(Exception):
    """Base class for pipeline errors."""


class TransportError(SearchServiceError):
    """Network failure, timeout or non-2xx status reaching a model or content endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ShapeError(SearchServiceError):
    """Response body did not contain any recognized text field."""

    def __init__(self, message: str, *, body: Any = None):
        super().__init__(message)
        self.body = body


class ParseError(SearchServiceError):
    """Source-suggestion reply was not a usable JSON object."""

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class ExhaustionError(SearchServiceError):
    """Every model in the fallback list failed."""

    def __init__(self, message: str, *, attempts: list[tuple[str, Exception]] | None = None):
        super().__init__(message)
        self.attempts = attempts or []
