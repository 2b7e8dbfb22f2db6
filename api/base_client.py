import time
import uuid
from abc import ABC, abstractmethod
from typing import Any

from models.errors import ShapeError


class BaseCompletionClient(ABC):
    """
    Abstract base class for language-model completion clients.

    A client performs exactly one outbound call per ``complete`` invocation and
    never retries internally; falling back across model identifiers is the
    orchestrator's job.
    """

    provider_name: str = "base"

    def __init__(self, *, temperature: float = 0.7, max_tokens: int = 2000, **kwargs):
        """
        Initialize the completion client.

        Args:
            temperature: Sampling temperature sent with every request
            max_tokens: Completion length limit sent with every request
            **kwargs: Additional transport-specific parameters
        """
        self.temperature = temperature
        self.max_tokens = max_tokens

    @abstractmethod
    async def complete(self, model_id: str, prompt: str) -> str:
        """
        Get a completion for ``prompt`` from ``model_id``.

        Args:
            model_id: Identifier of the backend model
            prompt: The full prompt text, sent as a single user message

        Returns:
            The completion text

        Raises:
            TransportError: network failure, timeout or non-2xx status
            ShapeError: the response carried no recognized text field
        """

    async def aclose(self) -> None:
        """Release transport resources. Default: nothing to release."""
        return None

    def _build_payload(self, model_id: str, prompt: str) -> dict[str, Any]:
        return {
            "model": model_id,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }

    @staticmethod
    def _extract_text(data: Any) -> str:
        """
        Normalize the heterogeneous response shapes into plain text.

        Checked in priority order: chat-choice content, bare ``content``,
        bare ``response``, raw string body.
        """
        if isinstance(data, dict):
            choices = data.get("choices")
            if isinstance(choices, list) and choices and isinstance(choices[0], dict):
                message = choices[0].get("message")
                if isinstance(message, dict):
                    content = message.get("content")
                    if isinstance(content, str) and content:
                        return content
            for key in ("content", "response"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value
        elif isinstance(data, str):
            return data

        raise ShapeError("Invalid API response format", body=data)

    @staticmethod
    def _generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
