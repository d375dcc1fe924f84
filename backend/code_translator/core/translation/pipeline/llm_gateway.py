"""Completion client for the external LLM service.

This module performs the single outbound call of a translation request
through LiteLLM and normalizes HTTP and transport failures into a
CompletionFailure instead of raising.
"""

import json
import logging
import re
import time
from typing import Any, Dict, Optional

import httpx
import litellm
from litellm import acompletion

from ..models.prompt import ComposedPrompt
from ..models.response import (
    CompletionFailure,
    CompletionOutcome,
    CompletionSuccess,
    TokenUsage,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "API request failed"

# Synthetic statuses for failures that never produced an HTTP response
TRANSPORT_ERROR_STATUS = 502
TIMEOUT_STATUS = 504

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def redact(text: str, secret: str) -> str:
    """Replace every occurrence of ``secret`` in ``text``."""
    if not secret:
        return text
    return text.replace(secret, "***")


def _envelope_message(body: Any) -> Optional[str]:
    """Pull the message out of an ``{"error": {"message": ...}}`` envelope."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def extract_error_message(exc: BaseException) -> str:
    """Best-effort error message from an upstream error.

    Looks at the HTTP response body first, then at any JSON object embedded
    in the exception text, and falls back to a generic message.
    """
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        try:
            message = _envelope_message(response.json())
        except ValueError:
            message = None
        if message:
            return message

    message = _envelope_message(getattr(exc, "body", None))
    if message:
        return message

    text = str(getattr(exc, "message", None) or exc)
    match = _JSON_OBJECT.search(text)
    if match:
        try:
            message = _envelope_message(json.loads(match.group(0)))
        except ValueError:
            message = None
        if message:
            return message

    return GENERIC_ERROR_MESSAGE


def map_exception(exc: Exception) -> Optional[CompletionFailure]:
    """Map a call exception to a CompletionFailure.

    Returns None for exceptions that are neither HTTP nor transport
    failures; those are bugs and should surface as internal errors.
    """
    if isinstance(exc, (litellm.Timeout, httpx.TimeoutException)):
        return CompletionFailure(
            status_code=TIMEOUT_STATUS,
            message=str(exc) or "Request to completion service timed out",
        )
    if isinstance(exc, (litellm.APIConnectionError, httpx.TransportError)):
        return CompletionFailure(
            status_code=TRANSPORT_ERROR_STATUS,
            message=str(exc) or "Could not reach completion service",
        )
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and 100 <= status_code <= 599:
        return CompletionFailure(status_code=status_code, message=extract_error_message(exc))
    return None


class CompletionClient:
    """Single-shot client for the completion service via LiteLLM.

    The credential is passed per call and sent by LiteLLM in the provider's
    auth header (``x-api-key`` for Anthropic). It is never logged.
    """

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        provider: str = "anthropic",
        max_tokens: int = 8192,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize completion client.

        Args:
            model: Model identifier
            provider: Provider name, used to build the LiteLLM model name
            max_tokens: Maximum tokens in the reply
            temperature: Sampling temperature, provider default if None
            timeout: Request timeout in seconds, library default if None
            base_url: Optional custom base URL for compatible APIs
        """
        self._model = model
        self._provider = provider
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout
        self._base_url = base_url

        if model.startswith(f"{provider}/"):
            self._litellm_model = model
        else:
            self._litellm_model = f"{provider}/{model}"

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    def _build_kwargs(self, prompt: ComposedPrompt, credential: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self._litellm_model,
            "messages": prompt.to_openai_format(),
            "max_tokens": self._max_tokens,
            "api_key": credential,
        }
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._base_url:
            kwargs["api_base"] = self._base_url
        return kwargs

    async def complete(self, prompt: ComposedPrompt, credential: str) -> CompletionOutcome:
        """Issue exactly one completion request.

        Args:
            prompt: Composed prompt
            credential: API key for the completion service

        Returns:
            CompletionSuccess with the raw reply, or CompletionFailure
        """
        start_time = time.time()
        logger.info(
            f"Completion call: model={self._litellm_model}, "
            f"max_tokens={self._max_tokens}, protocol=v{prompt.protocol_version}"
        )

        try:
            response = await acompletion(**self._build_kwargs(prompt, credential))
        except Exception as e:
            failure = map_exception(e)
            if failure is None:
                raise
            failure = failure.model_copy(
                update={"message": redact(failure.message, credential)}
            )
            logger.warning(
                f"Completion failed: model={self._litellm_model}, status={failure.status_code}"
            )
            return failure

        latency_ms = int((time.time() - start_time) * 1000)
        usage = getattr(response, "usage", None)
        result = CompletionSuccess(
            raw_text=response.choices[0].message.content or "",
            model=self._model,
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            latency_ms=latency_ms,
        )
        logger.info(
            f"Completion response: tokens={result.usage.total_tokens}, latency={latency_ms}ms"
        )
        return result
