"""Gemini-backed insight generation with timeout and rate-limit backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from finsight.config import Settings, get_settings

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are FinSight, a financial-literacy coach for students. Explain with "
    "simple analogies, stay encouraging and concrete, and never give "
    "individualized investment, legal or tax advice."
)

T = TypeVar("T", bound=BaseModel)


class InsightError(RuntimeError):
    """Raised when the insight provider fails."""


class InsightUnavailableError(InsightError):
    """Raised when no provider is configured."""


class InsightRateLimitError(InsightError):
    """Raised when retries are exhausted on rate-limit responses."""


class InsightTimeoutError(InsightError):
    """Raised when a single attempt exceeds the configured timeout."""


class InsightResponseError(InsightError):
    """Raised when the provider's reply does not match the requested schema."""


class InsightService:
    """Generate structured insights from a hosted LLM.

    ``model`` is anything exposing ``generate_content_async(prompt,
    generation_config=...)``; tests pass a stub, production builds a
    ``genai.GenerativeModel`` from settings on first use.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        model: Any = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        self._model = model
        self._sleep = sleep

    def _get_model(self) -> Any:
        if self._model is None:
            if not self._settings.gemini_api_key:
                raise InsightUnavailableError("FINSIGHT_GEMINI_API_KEY is not configured")
            genai.configure(api_key=self._settings.gemini_api_key)
            self._model = genai.GenerativeModel(
                self._settings.gemini_model,
                system_instruction=SYSTEM_INSTRUCTION,
            )
        return self._model

    def _retrying(self) -> AsyncRetrying:
        """Retry policy for rate-limited calls: exponential backoff plus jitter."""
        return AsyncRetrying(
            retry=retry_if_exception_type(google_exceptions.ResourceExhausted),
            stop=stop_after_attempt(self._settings.insight_max_retries),
            wait=wait_exponential(multiplier=self._settings.insight_backoff_base_seconds)
            + wait_random(0, self._settings.insight_backoff_jitter_seconds),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )

    async def generate_insight(self, prompt: str, schema: Type[T]) -> T:
        """Ask the model for JSON matching ``schema`` and parse it."""
        model = self._get_model()
        config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._request(model, prompt, config)
        except RetryError as exc:
            raise InsightRateLimitError(
                f"rate limited after {exc.last_attempt.attempt_number} attempts"
            ) from exc.last_attempt.exception()

        return self._parse(response, schema)

    async def _request(self, model: Any, prompt: str, config: Any) -> Any:
        timeout = self._settings.insight_timeout_seconds
        try:
            return await asyncio.wait_for(
                model.generate_content_async(prompt, generation_config=config),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise InsightTimeoutError(f"insight request timed out after {timeout}s") from exc
        except google_exceptions.ResourceExhausted:
            raise
        except google_exceptions.GoogleAPIError as exc:
            raise InsightError(str(exc)) from exc

    @staticmethod
    def _parse(response: Any, schema: Type[T]) -> T:
        try:
            text = response.text or "{}"
        except ValueError as exc:
            # blocked or empty candidates
            raise InsightResponseError(f"insight response has no text: {exc}") from exc
        try:
            return schema.model_validate_json(text)
        except ValidationError as exc:
            raise InsightResponseError(f"unexpected insight payload: {exc}") from exc
