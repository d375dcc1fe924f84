"""Error taxonomy for the translation pipeline.

These exceptions are raised inside pipeline stages and handed back by
``TranslationService.translate`` as values, so the boundary layer can render
each kind without catching anything. Protocol violations are not exceptions;
see ``ParseFailure``.
"""

from typing import Dict, Optional


class TranslationError(Exception):
    """Base class for pipeline errors rendered as ``{"error": message}``."""

    kind: str = "internal_error"
    default_status: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.message}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.message, self.status_code) == (other.message, other.status_code)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.status_code))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class ValidationError(TranslationError):
    """The caller sent a missing, empty or non-string field."""

    kind = "validation_error"
    default_status = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UpstreamError(TranslationError):
    """The completion service rejected the request or could not be reached."""

    kind = "upstream_error"
    default_status = 502

    def __init__(self, status_code: int, message: str):
        super().__init__(message, status_code=status_code)


class InternalError(TranslationError):
    """Anything unexpected inside the pipeline."""

    kind = "internal_error"
