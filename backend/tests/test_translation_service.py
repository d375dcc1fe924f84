import asyncio

import httpx
import pytest

from code_translator.core.translation import (
    CompletionClient,
    InternalError,
    ParsedTranslation,
    ParseFailure,
    PipelineConfig,
    TranslationService,
    UpstreamError,
    ValidationError,
)
from code_translator.core.translation.pipeline import llm_gateway

from conftest import (
    CREDENTIAL,
    WELL_FORMED_REPLY,
    ScriptedClient,
    failure,
    fake_model_response,
    success,
)


def retrying_service(client, attempts=3):
    config = PipelineConfig(max_attempts=attempts, backoff_base_ms=1, backoff_max_ms=2)
    return TranslationService(config=config, client=client)


@pytest.mark.asyncio
async def test_end_to_end_javascript_to_haskell(monkeypatch, valid_record):
    seen = {}

    async def fake_acompletion(**kwargs):
        seen.update(kwargs)
        return fake_model_response(WELL_FORMED_REPLY)

    monkeypatch.setattr(llm_gateway, "acompletion", fake_acompletion)

    result = await TranslationService().translate(valid_record)

    assert isinstance(result, ParsedTranslation)
    assert result.translated_code == "data X = X\n  deriving (Show, Eq)"
    assert result.tradeoffs.gained
    assert result.tradeoffs.lost
    assert result.tradeoffs.mitigation
    assert "class X {}" in seen["messages"][0]["content"]
    assert seen["api_key"] == CREDENTIAL


@pytest.mark.asyncio
async def test_upstream_rate_limit_is_passed_through(monkeypatch, valid_record):
    class RateLimited(Exception):
        status_code = 429

        def __init__(self):
            super().__init__("rate limit")
            self.response = httpx.Response(429, json={"error": {"message": "rate limited"}})

    async def fake_acompletion(**kwargs):
        raise RateLimited()

    monkeypatch.setattr(llm_gateway, "acompletion", fake_acompletion)

    result = await TranslationService().translate(valid_record)

    assert result == UpstreamError(status_code=429, message="rate limited")
    assert result.to_payload() == {"error": "rate limited"}
    assert CREDENTIAL not in repr(result)
    assert CREDENTIAL not in str(result.to_payload())


@pytest.mark.asyncio
async def test_validation_error_makes_no_network_call(valid_record):
    client = ScriptedClient(success(WELL_FORMED_REPLY))
    valid_record["credential"] = ""

    result = await TranslationService(client=client).translate(valid_record)

    assert isinstance(result, ValidationError)
    assert result.field == "credential"
    assert result.status_code == 400
    assert client.calls == []


@pytest.mark.asyncio
async def test_protocol_violation_returns_raw_text(valid_record):
    client = ScriptedClient(success("Here is your Haskell code: data X = X"))

    result = await TranslationService(client=client).translate(valid_record)

    assert isinstance(result, ParseFailure)
    assert result.raw_text == "Here is your Haskell code: data X = X"
    assert result.marker == "TRANSLATED CODE"


@pytest.mark.asyncio
async def test_unexpected_error_becomes_internal_error(valid_record):
    client = ScriptedClient(RuntimeError(f"boom with {CREDENTIAL}"))

    result = await TranslationService(client=client).translate(valid_record)

    assert isinstance(result, InternalError)
    assert result.status_code == 500
    assert CREDENTIAL not in result.message
    assert result.message == "boom with ***"


@pytest.mark.asyncio
async def test_single_attempt_by_default(valid_record):
    client = ScriptedClient(failure(503, "overloaded"), success(WELL_FORMED_REPLY))

    result = await TranslationService(client=client).translate(valid_record)

    assert result == UpstreamError(status_code=503, message="overloaded")
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_retries_transient_failures_when_configured(valid_record):
    client = ScriptedClient(
        failure(503, "overloaded"),
        failure(429, "rate limited"),
        success(WELL_FORMED_REPLY),
    )

    result = await retrying_service(client).translate(valid_record)

    assert isinstance(result, ParsedTranslation)
    assert len(client.calls) == 3
    assert all(call["credential"] == CREDENTIAL for call in client.calls)


@pytest.mark.asyncio
async def test_does_not_retry_client_errors(valid_record):
    client = ScriptedClient(failure(401, "invalid x-api-key"), success(WELL_FORMED_REPLY))

    result = await retrying_service(client).translate(valid_record)

    assert result == UpstreamError(status_code=401, message="invalid x-api-key")
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_returns_last_failure_when_retries_exhausted(valid_record):
    client = ScriptedClient(failure(500, "first"), failure(502, "second"), failure(503, "third"))

    result = await retrying_service(client).translate(valid_record)

    assert result == UpstreamError(status_code=503, message="third")
    assert len(client.calls) == 3


@pytest.mark.asyncio
async def test_concurrent_requests_do_not_share_state(valid_record):
    client = ScriptedClient(success(WELL_FORMED_REPLY))
    service = TranslationService(client=client)
    other = dict(valid_record, credential="sk-other", sourceCode="class Y {}")

    first, second = await asyncio.gather(service.translate(valid_record), service.translate(other))

    assert isinstance(first, ParsedTranslation)
    assert isinstance(second, ParsedTranslation)
    by_credential = {call["credential"]: call["prompt"].text for call in client.calls}
    assert "class X {}" in by_credential[CREDENTIAL]
    assert "class Y {}" in by_credential["sk-other"]


@pytest.mark.asyncio
async def test_cancellation_propagates(valid_record):
    started = asyncio.Event()

    class HangingClient:
        async def complete(self, prompt, credential):
            started.set()
            await asyncio.sleep(3600)

    task = asyncio.create_task(TranslationService(client=HangingClient()).translate(valid_record))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


def test_preview_composes_without_calling_client(valid_record):
    client = ScriptedClient(success(WELL_FORMED_REPLY))
    service = TranslationService(client=client)

    prompt = service.preview(valid_record)

    assert "class X {}" in prompt.text
    assert CREDENTIAL not in prompt.text
    assert client.calls == []


def test_preview_returns_validation_error(valid_record):
    del valid_record["sourceCode"]
    result = TranslationService(client=ScriptedClient(success(""))).preview(valid_record)
    assert isinstance(result, ValidationError)


def test_pipeline_config_from_settings():
    from code_translator.config import Settings

    settings = Settings(retry_max_attempts=4, llm_model="claude-x", request_timeout=30.0)
    config = PipelineConfig.from_settings(settings)

    assert config.max_attempts == 4
    assert config.model == "claude-x"
    assert config.request_timeout == 30.0
    assert config.max_tokens == 8192


def test_default_client_is_built_from_config():
    service = TranslationService(PipelineConfig(model="claude-haiku", provider="anthropic"))
    assert isinstance(service.client, CompletionClient)
    assert service.client.model == "claude-haiku"
