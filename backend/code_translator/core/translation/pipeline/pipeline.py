"""Translation service orchestrator.

This module provides the TranslationService class that runs the four
pipeline stages for one request and folds every outcome into a single
discriminated result.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import InternalError, UpstreamError, ValidationError
from ..models.prompt import ComposedPrompt
from ..models.request import TranslationRequest
from ..models.response import CompletionFailure, CompletionOutcome
from ..models.result import ParsedTranslation, ParseFailure
from .llm_gateway import CompletionClient, redact
from .output_processor import ResponseParser
from .prompt_composer import PromptComposer
from .request_validator import RequestValidator

logger = logging.getLogger(__name__)

TranslationOutcome = Union[
    ParsedTranslation,
    ParseFailure,
    ValidationError,
    UpstreamError,
    InternalError,
]


@dataclass
class PipelineConfig:
    """Configuration for the translation service."""

    provider: str = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 8192
    temperature: Optional[float] = None
    request_timeout: Optional[float] = None
    # Retry cap; 1 means a single attempt
    max_attempts: int = 1
    backoff_base_ms: int = 500
    backoff_max_ms: int = 8000

    @classmethod
    def from_settings(cls, settings: Any) -> "PipelineConfig":
        return cls(
            provider=settings.llm_provider,
            model=settings.llm_model,
            max_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            request_timeout=settings.request_timeout,
            max_attempts=settings.retry_max_attempts,
            backoff_base_ms=settings.retry_backoff_base_ms,
            backoff_max_ms=settings.retry_backoff_max_ms,
        )


def _should_retry(outcome: CompletionOutcome) -> bool:
    return isinstance(outcome, CompletionFailure) and outcome.is_retryable


class TranslationService:
    """Main orchestrator for code translation.

    Coordinates the flow:
    record -> RequestValidator -> PromptComposer -> CompletionClient -> ResponseParser

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        client: Optional[CompletionClient] = None,
        validator: Optional[RequestValidator] = None,
        composer: Optional[PromptComposer] = None,
        parser: Optional[ResponseParser] = None,
    ):
        """Initialize translation service.

        Args:
            config: Pipeline configuration, defaults if None
            client: Completion client; built from config if None
            validator: Request validator
            composer: Prompt composer
            parser: Response parser
        """
        self.config = config or PipelineConfig()
        self.client = client or CompletionClient(
            model=self.config.model,
            provider=self.config.provider,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            timeout=self.config.request_timeout,
        )
        self.validator = validator or RequestValidator()
        self.composer = composer or PromptComposer()
        self.parser = parser or ResponseParser()

    async def translate(self, record: Any) -> TranslationOutcome:
        """Execute the full translation pipeline.

        Args:
            record: Untyped inbound record

        Returns:
            ParsedTranslation, ParseFailure, ValidationError, UpstreamError
            or InternalError. Only cancellation propagates as an exception.
        """
        try:
            request = self.validator.validate(record)
        except ValidationError as e:
            logger.info(f"Rejected translation request: {e.message}")
            return e

        try:
            return await self._run(request)
        except Exception as e:
            message = redact(str(e), request.credential.get_secret_value())
            logger.exception("Translation pipeline failed unexpectedly")
            return InternalError(message or "Internal server error")

    async def _run(self, request: TranslationRequest) -> TranslationOutcome:
        prompt = self.composer.compose(request)
        logger.info(
            f"Translating {request.source_language} -> {request.target_language}: "
            f"{len(request.source_code)} chars, ~{prompt.estimated_input_tokens} prompt tokens"
        )

        outcome = await self._complete(prompt, request.credential.get_secret_value())
        if isinstance(outcome, CompletionFailure):
            return UpstreamError(status_code=outcome.status_code, message=outcome.message)

        result = self.parser.parse(outcome.raw_text)
        if isinstance(result, ParsedTranslation) and result.warnings:
            logger.info(f"Translation parsed with {len(result.warnings)} tolerated defect(s)")
        return result

    async def _complete(self, prompt: ComposedPrompt, credential: str) -> CompletionOutcome:
        """Call the completion service, retrying transient failures if configured."""
        if self.config.max_attempts <= 1:
            return await self.client.complete(prompt, credential)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.backoff_base_ms / 1000,
                max=self.config.backoff_max_ms / 1000,
            ),
            retry=retry_if_result(_should_retry),
            # Out of attempts: hand back the last failure instead of raising
            retry_error_callback=lambda state: state.outcome.result(),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        async for attempt in retrying:
            with attempt:
                outcome = await self.client.complete(prompt, credential)
            if not attempt.retry_state.outcome.failed:
                attempt.retry_state.set_result(outcome)
        return outcome

    def preview(self, record: Any) -> Union[ComposedPrompt, ValidationError]:
        """Validate and compose without calling the completion service."""
        try:
            request = self.validator.validate(record)
        except ValidationError as e:
            return e
        return self.composer.compose(request)
