"""Composed prompt model.

This module defines the prompt produced by the PromptComposer and consumed
by the CompletionClient.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Single message in LLM conversation."""

    role: str = Field(..., description="Message role: 'system', 'user', or 'assistant'")
    content: str = Field(..., description="Message content")


class ComposedPrompt(BaseModel):
    """Instruction text for one translation request.

    Derived deterministically from a TranslationRequest. It never contains
    the credential and is never shared across requests.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Complete single-turn instruction text")
    fence: str = Field(..., description="Fence sequence wrapping the source code")
    protocol_version: str = Field(..., description="Response protocol version embedded")
    estimated_input_tokens: int = Field(default=0, description="Estimated input token count")

    def to_messages(self) -> List[Message]:
        return [Message(role="user", content=self.text)]

    def to_openai_format(self) -> List[Dict[str, str]]:
        """Convert to OpenAI-style message dicts, the format litellm accepts."""
        return [m.model_dump() for m in self.to_messages()]

    def to_preview_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.text,
            "protocolVersion": self.protocol_version,
            "estimatedTokens": self.estimated_input_tokens,
        }
