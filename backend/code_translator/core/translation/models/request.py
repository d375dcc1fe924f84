"""Translation request model.

This is the validated input contract of the pipeline, produced by
``RequestValidator`` from an untyped inbound record.
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class TranslationRequest(BaseModel):
    """A single code translation request.

    The credential is kept as a ``SecretStr`` so that it never shows up in
    ``repr()``, logs or serialized output by accident.
    """

    model_config = ConfigDict(frozen=True)

    credential: SecretStr = Field(..., description="Completion service API key")
    source_language: str = Field(..., description="Language the code is written in")
    target_language: str = Field(..., description="Language to translate into")
    source_code: str = Field(..., description="Source snippet, kept verbatim")
