"""Ask a language model where to look for information about a query."""

import json
import re

from pydantic import BaseModel, ConfigDict, ValidationError

from api.base_client import BaseCompletionClient
from models.errors import ParseError
from utils.logger import get_logger

from .contracts import SourceSuggestion

logger = get_logger(__name__)

DISCOVERY_PROMPT_TEMPLATE = """Based on the user query "{query}" (language: {language}), suggest 3-5 relevant web search queries OR direct URLs to find the most up-to-date and accurate information.
Return your answer ONLY as a JSON object with one or both of the following keys: "searchQueries" (a list of strings) or "urls" (a list of strings). For example:
{{
  "searchQueries": ["latest AI developments in Hong Kong", "Hong Kong AI policy 2024"],
  "urls": ["https://www.example.com/ai-news", "https://www.another-example.com/hk-ai-report"]
}}
If suggesting search queries, ensure they are effective for use with a standard search engine.
If suggesting URLs, ensure they are likely to contain relevant information.
Provide ONLY the JSON object in your response."""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class SourceSuggestionSchema(BaseModel):
    """Expected shape of the model's reply."""

    model_config = ConfigDict(extra="ignore")

    searchQueries: list[str] | None = None
    urls: list[str] | None = None


def build_discovery_prompt(query: str, language: str) -> str:
    return DISCOVERY_PROMPT_TEMPLATE.format(query=query, language=language)


def parse_suggestion(raw_text: str) -> SourceSuggestion:
    """
    Decode a free-text model reply into a SourceSuggestion.

    Tolerates markdown code fences and prose around the JSON object.

    Raises:
        ParseError: no JSON object, schema mismatch, or neither key present
    """
    text = _FENCE_RE.sub("", (raw_text or "").strip())
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseError("No JSON object in source suggestion reply", raw_text=raw_text)

    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed JSON: {e}", raw_text=raw_text) from e

    try:
        schema = SourceSuggestionSchema.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Unexpected suggestion shape: {e.error_count()} errors", raw_text=raw_text) from e

    if schema.searchQueries is None and schema.urls is None:
        raise ParseError("Reply has neither searchQueries nor urls", raw_text=raw_text)

    return SourceSuggestion(
        search_queries=[q.strip() for q in schema.searchQueries or [] if q.strip()],
        urls=[u.strip() for u in schema.urls or [] if u.strip()],
    )


class SourceDiscovery:
    """Suggests search queries / URLs for a user query via the primary model."""

    def __init__(self, client: BaseCompletionClient, model_id: str):
        self._client = client
        self.model_id = model_id

    async def suggest_sources(self, query: str, language: str) -> SourceSuggestion:
        """Never raises: any failure degrades to an empty suggestion."""
        prompt = build_discovery_prompt(query, language)
        raw_text = ""
        try:
            raw_text = await self._client.complete(self.model_id, prompt)
            suggestion = parse_suggestion(raw_text)
        except ParseError as e:
            logger.warning(
                "Source suggestion reply was not in the expected format",
                extra={"extra_fields": {"error": str(e), "reply_preview": raw_text[:300]}},
            )
            return SourceSuggestion()
        except Exception as e:
            logger.error(
                f"Error getting potential sources from model: {e}",
                extra={"extra_fields": {"model": self.model_id, "error_type": type(e).__name__}},
            )
            return SourceSuggestion()

        logger.info(
            "Potential sources from model",
            extra={
                "extra_fields": {
                    "search_queries": list(suggestion.search_queries),
                    "urls": list(suggestion.urls),
                }
            },
        )
        return suggestion
