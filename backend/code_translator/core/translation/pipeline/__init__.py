"""Translation pipeline components.

This module provides the core pipeline components for code translation:
- RequestValidator: Checks the inbound record before any network call
- PromptComposer: Builds the instruction text with the response protocol
- CompletionClient: Single-shot LiteLLM call with normalized failures
- ResponseParser: Parses the reply against the response protocol
- TranslationService: Orchestrates the complete flow
"""

from .request_validator import RequestValidator
from .prompt_composer import PromptComposer, choose_fence
from .llm_gateway import CompletionClient
from .output_processor import ResponseParser
from .pipeline import TranslationService, TranslationOutcome, PipelineConfig

__all__ = [
    "RequestValidator",
    "PromptComposer",
    "choose_fence",
    "CompletionClient",
    "ResponseParser",
    "TranslationService",
    "TranslationOutcome",
    "PipelineConfig",
]
