"""Translation result models.

This module defines the terminal artifacts of the pipeline: a structured
ParsedTranslation when the model followed the response protocol, or a
ParseFailure carrying the raw reply when it did not.
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    """Immutable result model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SynthesisPoint(ResultModel):
    """One source-pattern to target-pattern mapping."""

    pattern_name: str = Field(..., description="Name of the structural pattern")
    source_approach: str = Field(default="", description="How the source idiom expresses it")
    target_approach: str = Field(default="", description="How the target idiom expresses it")
    rationale: str = Field(default="", description="Why the mapping preserves the invariant")


class TradeOffs(ResultModel):
    """What the target paradigm gains, loses and how to compensate."""

    gained: str = Field(default="", description="What the target paradigm gives you")
    lost: str = Field(default="", description="What is different or harder")
    mitigation: str = Field(default="", description="How to address what is lost")


class ParsedTranslation(ResultModel):
    """A reply that matched the response protocol.

    Tolerated defects (missing rationale, missing trade-off label, and so on)
    leave the affected field empty and add a note to ``warnings``.
    """

    kind: Literal["translation"] = "translation"
    translated_code: str = Field(..., description="Code from the first fenced block")
    synthesis_points: List[SynthesisPoint] = Field(default_factory=list)
    key_insight: str = Field(default="", description="Core paradigm shift")
    tradeoffs: TradeOffs = Field(default_factory=TradeOffs)
    warnings: List[str] = Field(default_factory=list, description="Tolerated parse defects")
    protocol_version: str = Field(..., description="Protocol version parsed against")
    raw_text: str = Field(..., description="Unmodified model reply")

    @property
    def is_complete(self) -> bool:
        return not self.warnings

    def to_response_dict(self) -> Dict[str, Any]:
        """Structured payload for the API, without the raw reply."""
        return self.model_dump(by_alias=True, exclude={"kind", "raw_text"})


class ParseFailure(ResultModel):
    """A reply that did not follow the response protocol.

    The raw text is kept so that a human can still read the translation.
    """

    kind: Literal["protocol_error"] = "protocol_error"
    raw_text: str = Field(..., description="Unmodified model reply")
    diagnostic: str = Field(..., description="Human-readable explanation")
    marker: str = Field(..., description="First missing or misordered marker")
    reason: Literal["missing", "out_of_order"] = Field(..., description="Failure reason")
    protocol_version: str = Field(..., description="Protocol version parsed against")
