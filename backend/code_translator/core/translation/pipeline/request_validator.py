"""Request validation for the translation pipeline.

Runs before anything expensive happens, so malformed input never costs a
completion call.
"""

from typing import Any, Dict, Mapping, Tuple

from pydantic import SecretStr

from ..errors import ValidationError
from ..models.request import TranslationRequest


class RequestValidator:
    """Turns an untyped inbound record into a TranslationRequest.

    Each field accepts its canonical name and the legacy name used by
    earlier clients. The canonical name wins when both are present.
    """

    # canonical name -> (legacy alias, model attribute)
    FIELDS: Dict[str, Tuple[str, str]] = {
        "credential": ("apiKey", "credential"),
        "sourceLanguage": ("sourceLang", "source_language"),
        "targetLanguage": ("targetLang", "target_language"),
        "sourceCode": ("code", "source_code"),
    }

    def validate(self, record: Any) -> TranslationRequest:
        """Validate a raw record.

        Args:
            record: Decoded request body

        Returns:
            TranslationRequest with trimmed credential and languages

        Raises:
            ValidationError: If any required field is absent, empty or not a string
        """
        if not isinstance(record, Mapping):
            raise ValidationError("Request body must be a JSON object")

        values: Dict[str, str] = {}
        for name, (alias, attribute) in self.FIELDS.items():
            value = record.get(name)
            if value is None:
                value = record.get(alias)
            if value is None:
                raise ValidationError(f"Missing required field: {name}", field=name)
            if not isinstance(value, str):
                raise ValidationError(f"Field '{name}' must be a string", field=name)
            if not value.strip():
                raise ValidationError(f"Field '{name}' must not be empty", field=name)
            # Source code is kept verbatim; whitespace can be significant
            values[attribute] = value if attribute == "source_code" else value.strip()

        return TranslationRequest(
            credential=SecretStr(values["credential"]),
            source_language=values["source_language"],
            target_language=values["target_language"],
            source_code=values["source_code"],
        )
