import time

import httpx

from models.errors import ShapeError, TransportError
from utils.logger import get_logger

from .base_client import BaseCompletionClient

logger = get_logger(__name__)


class HttpCompletionClient(BaseCompletionClient):
    """
    Client for a single JSON completion endpoint (e.g. a Cloudflare worker
    proxying several model vendors).

    The endpoint receives ``{model, messages, temperature, max_tokens, stream}``
    and may answer with any of the shapes understood by ``_extract_text``.
    """

    provider_name = "http"

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_s: float = 60.0,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        **kwargs,
    ):
        """
        Initialize the HTTP completion client.

        Args:
            endpoint: URL that accepts the completion payload via POST
            timeout_s: Per-request timeout in seconds
            headers: Extra headers sent with every request
            http_client: Pre-built client (tests inject one with a MockTransport)
            **kwargs: temperature / max_tokens, see BaseCompletionClient
        """
        super().__init__(**kwargs)
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)

    async def complete(self, model_id: str, prompt: str) -> str:
        request_id = self._generate_request_id()
        start_time = time.time()
        payload = self._build_payload(model_id, prompt)

        try:
            response = await self._client.post(self.endpoint, json=payload, headers=self.headers)
        except httpx.TimeoutException as e:
            self._log_failure(request_id, model_id, start_time, "timeout", str(e))
            raise TransportError(
                f"Request timed out after {self.timeout_s}s", url=self.endpoint
            ) from e
        except httpx.HTTPError as e:
            self._log_failure(request_id, model_id, start_time, "network", str(e))
            raise TransportError(f"Network error: {e}", url=self.endpoint) from e

        if not response.is_success:
            self._log_failure(
                request_id, model_id, start_time, "http_status", str(response.status_code)
            )
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                url=self.endpoint,
            )

        try:
            data = response.json()
        except ValueError:
            # Not JSON: the body itself is the completion
            data = response.text

        try:
            text = self._extract_text(data)
        except ShapeError:
            self._log_failure(request_id, model_id, start_time, "shape", type(data).__name__)
            raise

        logger.info(
            "Completion successful",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "model": model_id,
                    "latency_ms": self._measure_latency(start_time),
                    "chars": len(text),
                }
            },
        )
        return text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _log_failure(
        self, request_id: str, model_id: str, start_time: float, kind: str, detail: str
    ) -> None:
        logger.warning(
            f"Completion failed: {kind}",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "model": model_id,
                    "endpoint": self.endpoint,
                    "latency_ms": self._measure_latency(start_time),
                    "error_kind": kind,
                    "error_detail": detail,
                }
            },
        )
