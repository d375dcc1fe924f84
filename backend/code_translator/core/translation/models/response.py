"""Completion outcome models.

This module defines what the CompletionClient hands back for a single
call: either the raw reply text or a normalized failure.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class TokenUsage(BaseModel):
    """Token consumption details."""

    prompt_tokens: int = Field(default=0, description="Tokens in the prompt")
    completion_tokens: int = Field(default=0, description="Tokens in the completion")
    total_tokens: int = Field(default=0, description="Total tokens used")

    def model_post_init(self, __context: Any) -> None:
        """Calculate total if not provided."""
        if not self.total_tokens and (self.prompt_tokens or self.completion_tokens):
            self.total_tokens = self.prompt_tokens + self.completion_tokens


class CompletionSuccess(BaseModel):
    """The completion service answered with text."""

    kind: Literal["success"] = "success"
    raw_text: str = Field(..., description="Text of the first content item")
    model: str = Field(default="", description="Model identifier used")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token usage details")
    latency_ms: int = Field(default=0, description="Response latency in milliseconds")


class CompletionFailure(BaseModel):
    """The call failed at the HTTP or transport level."""

    kind: Literal["failure"] = "failure"
    status_code: int = Field(..., description="Upstream or synthetic HTTP status")
    message: str = Field(..., description="Best-effort error message")

    @property
    def is_retryable(self) -> bool:
        return self.status_code in (408, 429) or self.status_code >= 500


CompletionOutcome = Annotated[
    Union[CompletionSuccess, CompletionFailure],
    Field(discriminator="kind"),
]
