"""API dependencies.

The translation service holds no per-request state, so a single instance
is built lazily and shared across requests.
"""

from functools import lru_cache

from code_translator.config import settings
from code_translator.core.translation.pipeline import PipelineConfig, TranslationService


@lru_cache(maxsize=1)
def get_translation_service() -> TranslationService:
    """Provide the shared TranslationService."""
    return TranslationService(PipelineConfig.from_settings(settings))
