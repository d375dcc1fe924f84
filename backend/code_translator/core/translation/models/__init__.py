"""Translation pipeline data models.

This module provides structured data models for the translation pipeline,
ensuring type safety and clear contracts between components.
"""

from .request import TranslationRequest
from .prompt import Message, ComposedPrompt
from .response import (
    TokenUsage,
    CompletionSuccess,
    CompletionFailure,
    CompletionOutcome,
)
from .result import SynthesisPoint, TradeOffs, ParsedTranslation, ParseFailure

__all__ = [
    # Request models
    "TranslationRequest",
    # Prompt models
    "Message",
    "ComposedPrompt",
    # Completion models
    "TokenUsage",
    "CompletionSuccess",
    "CompletionFailure",
    "CompletionOutcome",
    # Result models
    "SynthesisPoint",
    "TradeOffs",
    "ParsedTranslation",
    "ParseFailure",
]
