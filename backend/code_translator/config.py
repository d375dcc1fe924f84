"""Application configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The completion service credential is not a setting; it arrives with
    each request.
    """

    # Application
    app_name: str = "Code Translator"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: list[str] = ["*"]

    # Completion service
    llm_provider: str = "anthropic"
    llm_model: str = "claude-sonnet-4-20250514"
    max_output_tokens: int = 8192
    temperature: Optional[float] = None
    # None leaves the overall timeout to the HTTP layer and LiteLLM's default
    request_timeout: Optional[float] = None

    # Retry policy; a single attempt unless raised
    retry_max_attempts: int = 1
    retry_backoff_base_ms: int = 500
    retry_backoff_max_ms: int = 8000

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def effective_log_level(self) -> str:
        """Log level to configure; debug mode forces DEBUG."""
        return "DEBUG" if self.debug else self.log_level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
