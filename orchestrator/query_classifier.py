"""Language-variant and complexity heuristics for search queries.

Both functions are pure; they only look at the query text.
"""

import re

from models.search_result import Complexity, LanguageVariant

SIMPLIFIED_MARKERS = re.compile(r"[国学时间问题电脑软件应该怎么样]")
TRADITIONAL_MARKERS = re.compile(r"[國學時間問題電腦軟體應該怎麼樣]")
CJK_IDEOGRAPH = re.compile(r"[\u4e00-\u9fff]")

SIMPLE_KEYWORDS = [
    "what day",
    "what time",
    "what date",
    "when is",
    "how much",
    "how many",
    "今天",
    "現在",
    "幾點",
    "多少",
    "什麼時候",
    "哪天",
    "今日",
    "當前",
]

COMPLEX_KEYWORDS = [
    "analyze",
    "compare",
    "explain",
    "evaluate",
    "discuss",
    "pros and cons",
    "advantages",
    "disadvantages",
    "strategy",
    "implementation",
    "methodology",
    "分析",
    "比較",
    "解釋",
    "評估",
    "討論",
    "優缺點",
    "優勢",
    "劣勢",
    "策略",
    "實施",
    "方法論",
    "如何實現",
    "深入",
    "詳細",
    "全面",
    "綜合",
]

SIMPLE_MAX_TOKENS = 5
MODERATE_MAX_TOKENS = 15


def detect_language_variant(query: str, fallback: str) -> str:
    """
    Guess the response language from the characters in ``query``.

    Simplified markers win over traditional ones. Chinese text without a
    marker keeps a Chinese ``fallback`` and otherwise becomes zh-TW; text
    without any CJK ideograph returns ``fallback`` unchanged.
    """
    text = query or ""
    if SIMPLIFIED_MARKERS.search(text):
        return LanguageVariant.SIMPLIFIED.value
    if TRADITIONAL_MARKERS.search(text):
        return LanguageVariant.TRADITIONAL.value

    if CJK_IDEOGRAPH.search(text):
        fallback = fallback or ""
        return fallback if fallback.startswith("zh") else LanguageVariant.TRADITIONAL.value

    return fallback


def count_query_tokens(query: str) -> int:
    """Whitespace-delimited tokens; unspaced CJK text is a single token."""
    return len((query or "").split())


def classify_complexity(query: str) -> Complexity:
    """
    Simple keywords first, then complex keywords, then token count.

    The order matters: a simple keyword beats a complex one, and either
    beats the length rule.
    """
    lowered = (query or "").lower()

    if any(keyword in lowered for keyword in SIMPLE_KEYWORDS):
        return Complexity.SIMPLE

    if any(keyword in lowered for keyword in COMPLEX_KEYWORDS):
        return Complexity.COMPLEX

    token_count = count_query_tokens(query)
    if token_count <= SIMPLE_MAX_TOKENS:
        return Complexity.SIMPLE
    if token_count <= MODERATE_MAX_TOKENS:
        return Complexity.MODERATE
    return Complexity.COMPLEX
