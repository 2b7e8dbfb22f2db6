import time

import openai

from models.errors import ShapeError, TransportError
from utils.logger import get_logger

from .base_client import BaseCompletionClient

logger = get_logger(__name__)


class OpenAICompatibleClient(BaseCompletionClient):
    """
    Completion client for OpenAI-compatible gateways.

    Uses the OpenAI SDK with a custom base URL, so any gateway speaking the
    chat-completions protocol works (OpenRouter serves the default
    ``vendor/model:tag`` identifiers from the model registry).
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout_s: float = 60.0,
        client: openai.AsyncOpenAI | None = None,
        **kwargs,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gateway API key
            base_url: Gateway base URL
            timeout_s: Per-request timeout in seconds
            client: Pre-built AsyncOpenAI instance
            **kwargs: temperature / max_tokens, see BaseCompletionClient
        """
        super().__init__(**kwargs)
        self.base_url = base_url
        self.timeout_s = timeout_s
        # max_retries=0: fallback happens across models, never on the same one
        self.client = client or openai.AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout_s, max_retries=0
        )

    async def complete(self, model_id: str, prompt: str) -> str:
        request_id = self._generate_request_id()
        start_time = time.time()

        try:
            response = await self.client.chat.completions.create(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=False,
            )
        except openai.APITimeoutError as e:
            self._log_failure(request_id, model_id, start_time, "timeout", str(e))
            raise TransportError(f"Request timed out after {self.timeout_s}s") from e
        except openai.APIStatusError as e:
            self._log_failure(request_id, model_id, start_time, "http_status", str(e.status_code))
            raise TransportError(
                f"HTTP error! status: {e.status_code}", status_code=e.status_code
            ) from e
        except openai.OpenAIError as e:
            self._log_failure(request_id, model_id, start_time, "network", str(e))
            raise TransportError(f"Network error: {e}") from e

        choices = getattr(response, "choices", None) or []
        text = choices[0].message.content if choices and choices[0].message else None
        if not text:
            self._log_failure(request_id, model_id, start_time, "shape", "empty choices")
            raise ShapeError("Invalid API response format", body=None)

        logger.info(
            "Completion successful",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "model": model_id,
                    "latency_ms": self._measure_latency(start_time),
                    "chars": len(text),
                    "tokens": response.usage.total_tokens if response.usage else None,
                }
            },
        )
        return text

    async def aclose(self) -> None:
        await self.client.close()

    def _log_failure(
        self, request_id: str, model_id: str, start_time: float, kind: str, detail: str
    ) -> None:
        logger.warning(
            f"Completion failed: {kind}",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "model": model_id,
                    "base_url": self.base_url,
                    "latency_ms": self._measure_latency(start_time),
                    "error_kind": kind,
                    "error_detail": detail,
                }
            },
        )
