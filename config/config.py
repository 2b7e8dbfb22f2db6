import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from orchestrator.model_registry import ModelRegistry

DEFAULT_COMPLETION_ENDPOINT = "https://aiquiz.ycm927.workers.dev"


class CompletionBackend(Enum):
    """Supported completion transports."""
    HTTP = "http"
    OPENAI = "openai"


@dataclass(frozen=True)
class SearchConfig:
    """Everything the search pipeline needs, passed explicitly at construction."""

    fallback_models: tuple[str, ...]
    completion_endpoint: str = DEFAULT_COMPLETION_ENDPOINT
    completion_backend: str = CompletionBackend.HTTP.value
    completion_api_key: str | None = None
    completion_base_url: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    completion_timeout_s: float = 60.0
    attempt_timeout_s: float | None = 90.0
    fetch_timeout_s: float = 10.0
    max_fetch_urls: int = 3
    follow_up_limit: int = 3
    tavily_api_key: str | None = None
    extra_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.fallback_models:
            raise ValueError("fallback_models must not be empty")
        if self.max_fetch_urls < 0:
            raise ValueError("max_fetch_urls must be >= 0")
        if not 0 <= self.follow_up_limit <= 4:
            raise ValueError("follow_up_limit must be between 0 and 4")

    @property
    def discovery_model(self) -> str:
        return self.fallback_models[0]


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        env_path = Path(__file__).parent.parent / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Completion transport
        self.COMPLETION_BACKEND = os.getenv("COMPLETION_BACKEND", CompletionBackend.HTTP.value).lower()
        self.COMPLETION_ENDPOINT = os.getenv("COMPLETION_ENDPOINT", DEFAULT_COMPLETION_ENDPOINT)
        self.COMPLETION_API_KEY = os.getenv("COMPLETION_API_KEY")
        self.COMPLETION_BASE_URL = os.getenv("COMPLETION_BASE_URL", "https://openrouter.ai/api/v1")

        # Model list: env override wins over the YAML registry
        self.MODEL_REGISTRY_PATH = os.getenv("MODEL_REGISTRY_PATH")
        registry = ModelRegistry.from_yaml(self.MODEL_REGISTRY_PATH)
        override = [m.strip() for m in os.getenv("FALLBACK_MODELS", "").split(",") if m.strip()]
        if override:
            registry = ModelRegistry.from_list(override, registry.completion_defaults())
        self.FALLBACK_MODELS = registry.fallback_models()

        defaults = registry.completion_defaults()
        self.COMPLETION_TEMPERATURE = float(
            os.getenv("COMPLETION_TEMPERATURE", defaults.get("temperature", 0.7))
        )
        self.COMPLETION_MAX_TOKENS = int(
            os.getenv("COMPLETION_MAX_TOKENS", defaults.get("max_tokens", 2000))
        )

        # Timeouts and limits
        self.COMPLETION_TIMEOUT_S = float(os.getenv("COMPLETION_TIMEOUT_S", "60"))
        self.ATTEMPT_TIMEOUT_S = float(os.getenv("ATTEMPT_TIMEOUT_S", "90"))
        self.FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "10"))
        self.MAX_FETCH_URLS = int(os.getenv("MAX_FETCH_URLS", "3"))
        self.FOLLOW_UP_LIMIT = int(os.getenv("FOLLOW_UP_LIMIT", "3"))

        # Optional search backend for model-suggested search queries
        self.TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")

    def validate(self) -> bool:
        """
        Validate that the configuration is usable for the selected backend.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        backends = [e.value for e in CompletionBackend]
        if self.COMPLETION_BACKEND not in backends:
            print(
                f"Error: Unknown COMPLETION_BACKEND '{self.COMPLETION_BACKEND}'. "
                f"Must be one of: {', '.join(backends)}"
            )
            return False
        if self.COMPLETION_BACKEND == CompletionBackend.OPENAI.value and not self.COMPLETION_API_KEY:
            print("Error: COMPLETION_API_KEY is not set. Please set it in the .env file.")
            return False
        if not self.COMPLETION_ENDPOINT and self.COMPLETION_BACKEND == CompletionBackend.HTTP.value:
            print("Error: COMPLETION_ENDPOINT is empty.")
            return False
        if not 0 <= self.FOLLOW_UP_LIMIT <= 4:
            print("Error: FOLLOW_UP_LIMIT must be between 0 and 4.")
            return False
        return True

    def to_search_config(self) -> SearchConfig:
        return SearchConfig(
            fallback_models=tuple(self.FALLBACK_MODELS),
            completion_endpoint=self.COMPLETION_ENDPOINT,
            completion_backend=self.COMPLETION_BACKEND,
            completion_api_key=self.COMPLETION_API_KEY,
            completion_base_url=self.COMPLETION_BASE_URL,
            temperature=self.COMPLETION_TEMPERATURE,
            max_tokens=self.COMPLETION_MAX_TOKENS,
            completion_timeout_s=self.COMPLETION_TIMEOUT_S,
            attempt_timeout_s=self.ATTEMPT_TIMEOUT_S or None,
            fetch_timeout_s=self.FETCH_TIMEOUT_S,
            max_fetch_urls=self.MAX_FETCH_URLS,
            follow_up_limit=self.FOLLOW_UP_LIMIT,
            tavily_api_key=self.TAVILY_API_KEY,
        )

    def get_model_info(self) -> str:
        """
        Get information about the configured completion backend.

        Returns:
            str: Formatted string with backend and primary model
        """
        if self.COMPLETION_BACKEND == CompletionBackend.OPENAI.value:
            return f"OpenAI-compatible ({self.COMPLETION_BASE_URL}, {self.FALLBACK_MODELS[0]})"
        return f"HTTP endpoint ({self.COMPLETION_ENDPOINT}, {self.FALLBACK_MODELS[0]})"
