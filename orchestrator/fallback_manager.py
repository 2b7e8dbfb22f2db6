import asyncio
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass

from api.base_client import BaseCompletionClient
from models.errors import ExhaustionError, ShapeError, TransportError
from models.search_result import SearchState
from utils.logger import get_logger

logger = get_logger(__name__)

EXHAUSTION_MESSAGE = "所有模型都失敗了"


@dataclass(frozen=True)
class FallbackPolicy:
    per_attempt_timeout_s: float | None = None


@dataclass(frozen=True)
class AttemptOutcome:
    model_id: str
    attempt_index: int
    text: str | None = None
    error: Exception | None = None
    latency_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)


class FallbackManager:
    """
    Tries model identifiers strictly in order, one at a time, until one
    returns a non-empty completion. No model is retried.
    """

    def __init__(self, policy: FallbackPolicy | None = None):
        self.policy = policy or FallbackPolicy()

    async def attempts(
        self,
        client: BaseCompletionClient,
        model_ids: list[str],
        prompt: str,
        request_id: str | None = None,
    ) -> AsyncIterator[AttemptOutcome]:
        """Yield one outcome per attempted model; stops after the first success."""
        for index, model_id in enumerate(model_ids):
            logger.debug(
                f"Search state -> {SearchState.COMPLETING.value} ({model_id})",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "state": SearchState.COMPLETING.value,
                        "model": model_id,
                        "attempt": index + 1,
                    }
                },
            )
            outcome = await self._attempt(client, model_id, index, prompt)
            yield outcome
            if outcome.ok:
                return

    async def run(
        self,
        client: BaseCompletionClient,
        model_ids: list[str],
        prompt: str,
        request_id: str | None = None,
    ) -> AttemptOutcome:
        """
        Drive ``attempts`` to the first success.

        Raises:
            ExhaustionError: every model failed (or the list was empty)
        """
        success: AttemptOutcome | None = None
        failures: list[tuple[str, Exception]] = []

        async for outcome in self.attempts(client, model_ids, prompt, request_id):
            if outcome.ok:
                success = outcome
                continue
            logger.warning(
                f"Model {outcome.model_id} failed, trying next",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": outcome.model_id,
                        "attempt": outcome.attempt_index + 1,
                        "error": str(outcome.error),
                        "error_type": type(outcome.error).__name__,
                        "latency_ms": outcome.latency_ms,
                    }
                },
            )
            failures.append((outcome.model_id, outcome.error))

        if success is None:
            raise ExhaustionError(EXHAUSTION_MESSAGE, attempts=failures)
        return success

    async def _attempt(
        self, client: BaseCompletionClient, model_id: str, index: int, prompt: str
    ) -> AttemptOutcome:
        start_time = time.time()
        timeout_s = self.policy.per_attempt_timeout_s
        try:
            if timeout_s:
                text = await asyncio.wait_for(client.complete(model_id, prompt), timeout=timeout_s)
            else:
                text = await client.complete(model_id, prompt)
        except asyncio.TimeoutError:
            error = TransportError(f"Attempt timed out after {timeout_s}s")
            return AttemptOutcome(model_id, index, error=error, latency_ms=_elapsed_ms(start_time))
        except Exception as e:
            return AttemptOutcome(model_id, index, error=e, latency_ms=_elapsed_ms(start_time))

        if not text:
            error = ShapeError("Empty completion")
            return AttemptOutcome(model_id, index, error=error, latency_ms=_elapsed_ms(start_time))

        return AttemptOutcome(model_id, index, text=text, latency_ms=_elapsed_ms(start_time))


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
