"""Translation API routes."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from code_translator.api.dependencies import get_translation_service
from code_translator.core.translation import (
    ParsedTranslation,
    ParseFailure,
    TranslationError,
    TranslationService,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_record(request: Request) -> Any:
    """Decode the JSON body, or return a ValidationError."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ValidationError("Request body must be valid JSON")


@router.post("/translate")
async def translate(
    request: Request,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate a code snippet into another language.

    Body: ``{credential, sourceLanguage, targetLanguage, sourceCode}``.
    A reply that breaks the response protocol is still a 200; the raw
    text is returned together with the diagnostic.
    """
    record = await _read_record(request)
    if isinstance(record, ValidationError):
        return JSONResponse(status_code=record.status_code, content=record.to_payload())

    outcome = await service.translate(record)

    if isinstance(outcome, ParsedTranslation):
        return JSONResponse(
            status_code=200,
            content={
                "translation": outcome.raw_text,
                "result": outcome.to_response_dict(),
            },
        )
    if isinstance(outcome, ParseFailure):
        return JSONResponse(
            status_code=200,
            content={
                "translation": outcome.raw_text,
                "protocolError": outcome.diagnostic,
            },
        )
    if isinstance(outcome, TranslationError):
        return JSONResponse(status_code=outcome.status_code, content=outcome.to_payload())

    logger.error(f"Unexpected pipeline outcome type: {type(outcome).__name__}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.post("/translate/preview")
async def preview_translation_prompt(
    request: Request,
    service: TranslationService = Depends(get_translation_service),
):
    """Preview the composed prompt without calling the completion service."""
    record = await _read_record(request)
    if isinstance(record, ValidationError):
        return JSONResponse(status_code=record.status_code, content=record.to_payload())

    prompt = service.preview(record)
    if isinstance(prompt, ValidationError):
        return JSONResponse(status_code=prompt.status_code, content=prompt.to_payload())
    return prompt.to_preview_dict()
