"""
Retrieval-augmented prompt assembly.

The final prompt is: optional web context block + role preamble (date, focus,
language, accuracy) + complexity-dependent answer-shape block + the user's
query + an answer cue. Wording is picked per language variant: the
simplified-Chinese template for zh-CN, the traditional one for everything
else.
"""

from datetime import date, datetime, timezone
from typing import Mapping

from models.search_result import Complexity, FocusCategory, LanguageVariant
from orchestrator.query_classifier import classify_complexity, detect_language_variant
from tools.web.contracts import ContextSnippet

S = LanguageVariant.SIMPLIFIED
T = LanguageVariant.TRADITIONAL

FOCUS_INSTRUCTIONS: dict[FocusCategory, dict[LanguageVariant, str]] = {
    FocusCategory.NEWS: {S: "专注于最新新闻和时事", T: "專注於最新新聞和時事"},
    FocusCategory.ACADEMIC: {S: "专注于学术研究和教育资源", T: "專注於學術研究和教育資源"},
    FocusCategory.FINANCE: {S: "专注于金融市场和投资信息", T: "專注於金融市場和投資資訊"},
    FocusCategory.TRAVEL: {S: "专注于旅游信息和地点介绍", T: "專注於旅遊資訊和地點介紹"},
    FocusCategory.SHOPPING: {S: "专注于产品信息和购物建议", T: "專注於產品資訊和購物建議"},
    FocusCategory.ALL: {S: "提供全面的信息", T: "提供全面的資訊"},
}

RESPONSE_REQUIREMENTS: dict[Complexity, dict[LanguageVariant, str]] = {
    Complexity.SIMPLE: {
        S: """
**回应要求 (简单问题):**
- 用1-3句话直接回答
- 提供关键信息，避免过度解释
- 如果是事实问题，直接给出答案
- 保持简洁明了""",
        T: """
**回應要求 (簡單問題):**
- 用1-3句話直接回答
- 提供關鍵資訊，避免過度解釋
- 如果是事實問題，直接給出答案
- 保持簡潔明瞭""",
    },
    Complexity.MODERATE: {
        S: """
**回应要求 (中等复杂度):**
- 用2-4个段落回答
- 提供核心信息和必要背景
- 包含相关细节但避免冗余
- 结构清晰，重点突出""",
        T: """
**回應要求 (中等複雜度):**
- 用2-4個段落回答
- 提供核心資訊和必要背景
- 包含相關細節但避免冗餘
- 結構清晰，重點突出""",
    },
    Complexity.COMPLEX: {
        S: """
**回应要求 (复杂问题):**
- 提供详细、结构化的回答
- 包含多个角度和深入分析
- 提供背景信息、现状和趋势
- 给出实用建议和总结""",
        T: """
**回應要求 (複雜問題):**
- 提供詳細、結構化的回答
- 包含多個角度和深入分析
- 提供背景資訊、現狀和趨勢
- 給出實用建議和總結""",
    },
}

LANGUAGE_INSTRUCTIONS: dict[LanguageVariant | None, str] = {
    S: "使用简体中文回答，使用中国大陆的用词习惯",
    T: "使用繁體中文回答，使用台灣香港的用詞習慣",
    None: "Answer in English",
}

PROMPT_TEMPLATES: dict[LanguageVariant, str] = {
    S: """你是专业的AI搜索助手，类似Perplexity.ai。根据问题复杂度提供适当详细程度的回答。

**基本要求:**
1. 直接回答问题，不说客套话
2. 使用最新信息（当前日期：{current_date}）
3. {focus_instruction}
4. {language_instruction}
5. 确保准确性和实用性

{response_requirement}

**用户问题:** {query}

现在开始回答：""",
    T: """你是專業的AI搜索助手，類似Perplexity.ai。根據問題複雜度提供適當詳細程度的回答。

**基本要求:**
1. 直接回答問題，不說客套話
2. 使用最新資訊（當前日期：{current_date}）
3. {focus_instruction}
4. {language_instruction}
5. 確保準確性和實用性

{response_requirement}

**用戶問題:** {query}

現在開始回答：""",
}

CONTEXT_HEADER = "\n\n**Relevant Information from Web Search:**\n"
CONTEXT_FOOTER = (
    "\nPlease synthesize an answer based on the above information and your general knowledge. "
    "Cite sources using [Source X] notation where appropriate.\n"
)


def template_variant(detected_language: str) -> LanguageVariant:
    """zh-CN gets the simplified wording; every other language the traditional one."""
    return S if detected_language == S.value else T


def instruction_variant(detected_language: str) -> LanguageVariant | None:
    """Which answer language to ask for; None means English."""
    if detected_language == S.value:
        return S
    if detected_language.lower().startswith("zh"):
        return T
    return None


class PromptBuilder:
    """
    Deterministic prompt assembly.

    The lookup tables are checked once at construction so a missing focus
    category or complexity tier fails at startup rather than silently
    falling through at request time.
    """

    def __init__(
        self,
        focus_instructions: Mapping[FocusCategory, Mapping[LanguageVariant, str]] | None = None,
        response_requirements: Mapping[Complexity, Mapping[LanguageVariant, str]] | None = None,
    ):
        self._focus_instructions = focus_instructions or FOCUS_INSTRUCTIONS
        self._response_requirements = response_requirements or RESPONSE_REQUIREMENTS
        self._validate_tables()

    def _validate_tables(self) -> None:
        for category in FocusCategory:
            entry = self._focus_instructions.get(category)
            if not entry or any(not entry.get(v) for v in LanguageVariant):
                raise ValueError(f"Missing focus instruction for '{category.value}'")
        for tier in Complexity:
            entry = self._response_requirements.get(tier)
            if not entry or any(not entry.get(v) for v in LanguageVariant):
                raise ValueError(f"Missing response requirement for '{tier.value}'")

    def build_prompt(
        self,
        query: str,
        language: str,
        focus: FocusCategory | str | None,
        context_snippets: list[ContextSnippet] | None = None,
        today: date | None = None,
    ) -> str:
        detected = detect_language_variant(query, language)
        variant = template_variant(detected)
        complexity = classify_complexity(query)
        current_date = (today or datetime.now(timezone.utc).date()).isoformat()

        focus_instruction = self._focus_instructions[FocusCategory.parse(focus)][variant]
        response_requirement = self._response_requirements[complexity][variant]
        language_instruction = LANGUAGE_INSTRUCTIONS[instruction_variant(detected)]

        body = PROMPT_TEMPLATES[variant].format(
            current_date=current_date,
            focus_instruction=focus_instruction,
            language_instruction=language_instruction,
            response_requirement=response_requirement,
            query=query,
        )
        return build_context_block(context_snippets or []) + body


def build_context_block(context_snippets: list[ContextSnippet]) -> str:
    if not context_snippets:
        return ""

    parts = [CONTEXT_HEADER]
    for index, snippet in enumerate(context_snippets, start=1):
        parts.append(f"\n[Source {index}: {snippet.url} ({snippet.title or 'Untitled'})]\n{snippet.content}\n")
    parts.append(CONTEXT_FOOTER)
    return "".join(parts)
