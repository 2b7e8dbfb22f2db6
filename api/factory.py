"""Factory for creating the configured completion client."""

from config.config import CompletionBackend, SearchConfig
from utils.logger import get_logger

from .base_client import BaseCompletionClient

logger = get_logger(__name__)


def create_completion_client(config: SearchConfig) -> BaseCompletionClient:
    """
    Build the completion client selected by ``config.completion_backend``.

    Raises:
        ValueError: unknown backend, or the OpenAI backend without an API key
    """
    backend = (config.completion_backend or "").lower().strip()

    if backend == CompletionBackend.HTTP.value:
        from .http_completion_client import HttpCompletionClient

        logger.info(f"Using HTTP completion endpoint {config.completion_endpoint}")
        return HttpCompletionClient(
            config.completion_endpoint,
            timeout_s=config.completion_timeout_s,
            headers=config.extra_headers,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    if backend == CompletionBackend.OPENAI.value:
        from .openai_compatible_client import OpenAICompatibleClient

        if not config.completion_api_key:
            raise ValueError("COMPLETION_API_KEY not found in environment variables")
        logger.info(f"Using OpenAI-compatible gateway {config.completion_base_url}")
        return OpenAICompatibleClient(
            config.completion_api_key,
            base_url=config.completion_base_url or "https://openrouter.ai/api/v1",
            timeout_s=config.completion_timeout_s,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    raise ValueError(
        f"Unsupported COMPLETION_BACKEND: {backend}. "
        f"Must be one of: {', '.join(e.value for e in CompletionBackend)}"
    )
