"""Anthropic Text Generator: one-shot Messages API calls for book recommendations.

Invariants:
    - 429 is retried after Retry-After (or backoff); exhausted -> "rate_limit"
    - 5xx, 529 Overloaded and connection failures are retried; exhausted -> "connection_error"
    - Timeouts and other 4xx fail on the first attempt
    - At most max_retries + 1 requests per generate() call
    - Every SDK failure leaves as ExternalServiceError (core/errors.py)

Design Decisions:
    - SDK retries off (max_retries=0); the retry policy lives here
    - +/-25% jitter on exponential backoff
"""

import asyncio
import logging
import random
from dataclasses import dataclass

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from bookcircle.core.errors import ErrorContext, ExternalServiceError

logger = logging.getLogger(__name__)

_SERVICE = "Anthropic API"
_OVERLOADED = 529


@dataclass(frozen=True)
class _Failure:
    error_type: str
    retryable: bool
    retry_after_ms: int | None = None


def _retry_after_ms(error: APIStatusError) -> int | None:
    value = error.response.headers.get("retry-after")
    return int(value) * 1000 if value and value.isdigit() else None


def classify_failure(error: APIError) -> _Failure:
    """Map an SDK exception to the retry decision and reported error type."""
    if isinstance(error, RateLimitError):
        return _Failure("rate_limit", True, _retry_after_ms(error))
    if isinstance(error, APITimeoutError):
        return _Failure("timeout", False)
    if isinstance(error, (APIConnectionError, InternalServerError)):
        return _Failure("connection_error", True)
    if isinstance(error, APIStatusError) and error.status_code == _OVERLOADED:
        return _Failure("connection_error", True)
    return _Failure("client_error", False)


class AnthropicTextGenerator:
    """TextGenerator backed by AsyncAnthropic.messages.create."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1024,
        max_retries: int = 2,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 20_000,
        timeout_seconds: int = 60,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def generate(self, prompt: str, context: ErrorContext | None = None) -> str:
        attempt = 0
        while True:
            try:
                response = await self.client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                )
            except APIError as e:
                failure = classify_failure(e)
                if not failure.retryable or attempt >= self.max_retries:
                    raise self._give_up(e, failure, attempt, context) from e
                delay = failure.retry_after_ms or self._backoff(attempt)
                logger.warning(
                    f"{failure.error_type} from {_SERVICE}, retrying in {delay}ms",
                    extra={"attempt": attempt + 1},
                )
                await asyncio.sleep(delay / 1000)
                attempt += 1
                continue

            logger.info(
                "Recommendation reply received",
                extra={
                    "attempt": attempt + 1,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )
            return "".join(
                block.text for block in response.content
                if getattr(block, "type", None) == "text"
            )

    def _give_up(
        self,
        error: APIError,
        failure: _Failure,
        attempt: int,
        context: ErrorContext | None,
    ) -> ExternalServiceError:
        message = str(error)
        if failure.retryable:
            message = f"Still failing after {attempt + 1} attempts: {error}"
        return ExternalServiceError(
            _SERVICE, message, failure.error_type,
            retry_after_ms=failure.retry_after_ms, context=context,
        )

    def _backoff(self, attempt: int) -> int:
        delay = min(self.max_delay_ms, self.base_delay_ms * 2 ** attempt)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
