"""Translation package.

This package provides the code translation pipeline.

Architecture:
- protocol.py: Versioned response protocol shared by composer and parser
- errors.py: Error taxonomy returned by the pipeline
- models/: Data models (TranslationRequest, ComposedPrompt, ParsedTranslation, etc.)
- pipeline/: Pipeline components (RequestValidator, PromptComposer, etc.)
"""

from .protocol import CURRENT_PROTOCOL, PROTOCOL_V1, ResponseProtocol, SectionSpec
from .errors import TranslationError, ValidationError, UpstreamError, InternalError

# Re-export models for convenience
from .models import (
    TranslationRequest,
    Message,
    ComposedPrompt,
    TokenUsage,
    CompletionSuccess,
    CompletionFailure,
    CompletionOutcome,
    SynthesisPoint,
    TradeOffs,
    ParsedTranslation,
    ParseFailure,
)

# Re-export pipeline components
from .pipeline import (
    RequestValidator,
    PromptComposer,
    CompletionClient,
    ResponseParser,
    TranslationService,
    TranslationOutcome,
    PipelineConfig,
)

__all__ = [
    # Protocol
    "CURRENT_PROTOCOL",
    "PROTOCOL_V1",
    "ResponseProtocol",
    "SectionSpec",
    # Errors
    "TranslationError",
    "ValidationError",
    "UpstreamError",
    "InternalError",
    # Models
    "TranslationRequest",
    "Message",
    "ComposedPrompt",
    "TokenUsage",
    "CompletionSuccess",
    "CompletionFailure",
    "CompletionOutcome",
    "SynthesisPoint",
    "TradeOffs",
    "ParsedTranslation",
    "ParseFailure",
    # Pipeline
    "RequestValidator",
    "PromptComposer",
    "CompletionClient",
    "ResponseParser",
    "TranslationService",
    "TranslationOutcome",
    "PipelineConfig",
]
