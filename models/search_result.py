from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from utils.url_utils import extract_hostname

MAX_SNIPPET_CHARS = 200
MAX_CONTENT_CHARS = 1500


class FocusCategory(str, Enum):
    ALL = "all"
    NEWS = "news"
    ACADEMIC = "academic"
    FINANCE = "finance"
    TRAVEL = "travel"
    SHOPPING = "shopping"

    @classmethod
    def parse(cls, value: "str | FocusCategory | None") -> "FocusCategory":
        """Map a request value onto the closed set; anything unknown becomes ALL."""
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.ALL

    @classmethod
    def is_known(cls, value: str | None) -> bool:
        return (value or "").strip().lower() in {m.value for m in cls}


class LanguageVariant(str, Enum):
    SIMPLIFIED = "zh-CN"
    TRADITIONAL = "zh-TW"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class SearchState(str, Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    FETCHING = "fetching"
    COMPOSING = "composing"
    COMPLETING = "completing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchQuery:
    query: str
    language: str = "zh-TW"
    focus: FocusCategory = FocusCategory.ALL

    def __post_init__(self):
        if not isinstance(self.focus, FocusCategory):
            object.__setattr__(self, "focus", FocusCategory.parse(self.focus))


@dataclass(frozen=True)
class SourceRecord:
    title: str
    url: str
    snippet: str
    content: str
    hostname: str

    @classmethod
    def from_page(cls, url: str, text: str, title: str | None = None) -> "SourceRecord":
        return cls(
            title=title or url,
            url=url,
            snippet=text[:MAX_SNIPPET_CHARS],
            content=text[:MAX_CONTENT_CHARS],
            hostname=extract_hostname(url),
        )

    @classmethod
    def failure_placeholder(cls, url: str, reason: str = "") -> "SourceRecord":
        snippet = f"Could not retrieve content from this URL. {reason}"
        return cls(
            title=f"Failed to load: {url}",
            url=url,
            snippet=snippet[:MAX_SNIPPET_CHARS],
            content="",
            hostname=extract_hostname(url),
        )

    @property
    def is_placeholder(self) -> bool:
        return self.content == ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "content": self.content,
            "hostname": self.hostname,
        }


@dataclass(frozen=True)
class SearchResult:
    query: str
    sources: list[SourceRecord] = field(default_factory=list)
    answer: str = ""
    follow_up_questions: list[str] = field(default_factory=list)
    search_time: int = 0  # milliseconds
    has_results: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by the display layer (camelCase keys)."""
        return {
            "query": self.query,
            "sources": [s.to_dict() for s in self.sources],
            "answer": self.answer,
            "followUpQuestions": list(self.follow_up_questions),
            "searchTime": self.search_time,
            "hasResults": self.has_results,
        }
