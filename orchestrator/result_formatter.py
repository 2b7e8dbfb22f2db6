from dataclasses import dataclass

from models.search_result import SearchResult, SourceRecord
from orchestrator.query_classifier import CJK_IDEOGRAPH
from utils.url_utils import extract_hostname

FOLLOW_UP_LIMIT = 3
MAX_FOLLOW_UP_LIMIT = 4


@dataclass(frozen=True)
class FollowUpGroup:
    name: str
    keywords: tuple[str, ...]
    questions: tuple[str, ...]

    def matches(self, lowered_query: str) -> bool:
        return any(keyword in lowered_query for keyword in self.keywords)


# Checked in order; the first group whose keyword appears in the query wins
FOLLOW_UP_GROUPS: tuple[FollowUpGroup, ...] = (
    FollowUpGroup(
        name="ai",
        keywords=("ai", "人工智能"),
        questions=(
            "AI技術對香港未來發展的影響？",
            "香港在AI領域的競爭優勢是什麼？",
            "如何在香港學習AI相關技能？",
            "AI人才在香港的就業前景如何？",
        ),
    ),
    FollowUpGroup(
        name="finance",
        keywords=("金融", "投資"),
        questions=(
            "香港金融市場的最新趨勢？",
            "投資香港市場需要注意什麼？",
            "香港作為金融中心的優勢？",
            "滬港通和深港通如何運作？",
        ),
    ),
    FollowUpGroup(
        name="education",
        keywords=("教育",),
        questions=(
            "香港教育制度的特色？",
            "如何申請香港的大學？",
            "香港學生升學路徑有哪些？",
            "香港教育局最新的政策是什麼？",
        ),
    ),
)

GENERAL_FOLLOW_UPS: tuple[str, ...] = (
    "相關的最新發展趨勢？",
    "這個領域在香港的現狀如何？",
    "未來可能的發展方向？",
    "香港在這方面與其他地區比較如何？",
)

ENGLISH_FOLLOW_UP_GROUPS: tuple[FollowUpGroup, ...] = (
    FollowUpGroup(
        name="ai",
        keywords=("ai", "artificial intelligence", "machine learning"),
        questions=(
            "What policy support does Hong Kong provide for AI development?",
            "How does AI technology impact Hong Kong's financial industry?",
            "What are the famous AI research institutions in Hong Kong?",
            "What are the career prospects for AI talent in Hong Kong?",
        ),
    ),
    FollowUpGroup(
        name="finance",
        keywords=("finance", "investment", "stock"),
        questions=(
            "What are Hong Kong's advantages as an international financial center?",
            "How to open an account for investment in HKEX?",
            "How is fintech developing in Hong Kong?",
            "How do Stock Connect programs work?",
        ),
    ),
    FollowUpGroup(
        name="education",
        keywords=("education", "university", "study"),
        questions=(
            "What are the characteristics of Hong Kong's education system?",
            "How to apply for universities in Hong Kong?",
            "What study options do Hong Kong students have?",
            "What are the latest policies of Hong Kong's Education Bureau?",
        ),
    ),
)

# {query} is filled with the user's query
ENGLISH_GENERAL_FOLLOW_UPS: tuple[str, ...] = (
    "What are the latest developments of {query} in Hong Kong?",
    "What are the latest changes in related policies?",
    "What significance does this have for Hong Kong's future development?",
    "How does Hong Kong compare with other regions in this aspect?",
)


def wants_chinese_follow_ups(query: str, language: str | None = None) -> bool:
    """Chinese questions for Chinese text or a zh-* language; English otherwise."""
    if CJK_IDEOGRAPH.search(query or ""):
        return True
    return (language or "").lower().startswith("zh")


class ResultFormatter:
    """Maps fetched sources and the raw completion into a SearchResult."""

    def __init__(self, follow_up_limit: int = FOLLOW_UP_LIMIT):
        if not 0 <= follow_up_limit <= MAX_FOLLOW_UP_LIMIT:
            raise ValueError(f"follow_up_limit must be between 0 and {MAX_FOLLOW_UP_LIMIT}")
        self.follow_up_limit = follow_up_limit

    def format(
        self,
        query: str,
        raw_answer: str,
        elapsed_ms: int,
        fetched_sources: list[SourceRecord],
        language: str | None = None,
    ) -> SearchResult:
        sources = [
            SourceRecord(
                title=s.title,
                url=s.url,
                snippet=s.snippet,
                content=s.content,
                hostname=extract_hostname(s.url),
            )
            for s in fetched_sources
        ]

        return SearchResult(
            query=query,
            sources=sources,
            answer=raw_answer,
            follow_up_questions=self.follow_up_questions(query, language),
            search_time=elapsed_ms,
            has_results=True,
        )

    def follow_up_questions(self, query: str, language: str | None = None) -> list[str]:
        lowered = (query or "").lower()
        if wants_chinese_follow_ups(query, language):
            groups, general = FOLLOW_UP_GROUPS, GENERAL_FOLLOW_UPS
        else:
            groups = ENGLISH_FOLLOW_UP_GROUPS
            general = tuple(q.format(query=query) for q in ENGLISH_GENERAL_FOLLOW_UPS)

        for group in groups:
            if group.matches(lowered):
                return list(group.questions[: self.follow_up_limit])
        return list(general[: self.follow_up_limit])
