import pytest
from dotenv import load_dotenv

from api.base_client import BaseCompletionClient
from config.config import SearchConfig
from tools.web.source_discovery import DISCOVERY_PROMPT_TEMPLATE

# Load environment variables from .env file for tests
load_dotenv()

MODELS = (
    "google/gemini-2.0-flash-exp:free",
    "deepseek/deepseek-r1-0528:free",
    "google/gemini-2.5-flash-preview-05-20",
)

_DISCOVERY_PREFIX = DISCOVERY_PROMPT_TEMPLATE.split("{query}")[0]


class ScriptedCompletionClient(BaseCompletionClient):
    """
    Deterministic completion client.

    Discovery prompts get ``discovery_reply``; answer prompts get
    ``replies[model_id]`` (or ``default``). A reply that is an exception
    instance is raised instead of returned.
    """

    provider_name = "fake"

    def __init__(self, replies=None, default="stub answer", discovery_reply='{"urls": []}'):
        super().__init__()
        self.replies = dict(replies or {})
        self.default = default
        self.discovery_reply = discovery_reply
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def complete(self, model_id: str, prompt: str) -> str:
        self.calls.append((model_id, prompt))
        if prompt.startswith(_DISCOVERY_PREFIX):
            reply = self.discovery_reply
        else:
            reply = self.replies.get(model_id, self.default)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def aclose(self) -> None:
        self.closed = True

    @property
    def answer_calls(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if not c[1].startswith(_DISCOVERY_PREFIX)]


class StaticPageFetcher:
    """``fetch_page_text`` served from a dict; exception values are raised."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requested: list[str] = []

    async def fetch_page_text(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages.get(url, "")
        if isinstance(page, Exception):
            raise page
        return page

    async def aclose(self) -> None:
        return None


@pytest.fixture
def search_config():
    return SearchConfig(fallback_models=MODELS, attempt_timeout_s=None)


@pytest.fixture
def scripted_client():
    return ScriptedCompletionClient


@pytest.fixture
def static_fetcher():
    return StaticPageFetcher
