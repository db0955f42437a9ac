"""
Configuration and settings for the news functions backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TARGET_LANGUAGES = ["hi", "es", "ur", "zh", "fr", "ja"]

DEFAULT_CONTENT_LANGUAGES = {
    "en": "English",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ar": "Arabic",
    "ja": "Japanese",
    "ko": "Korean",
    "ru": "Russian",
}


class ConfigurationError(RuntimeError):
    """Raised when a required secret is missing at startup."""


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/functions/v1")
    log_level: str = Field(default="INFO")

    # Relational storage (Postgres expected). The URL carries the service
    # credential.
    database_url: Optional[str] = Field(default=None)

    # Firebase service account JSON blob used for push delivery.
    firebase_service_account: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Translation
    translate_endpoint: str = Field(
        default="https://translate.googleapis.com/translate_a/single"
    )
    translate_timeout_seconds: float = Field(default=30.0)
    translation_delay_seconds: float = Field(default=0.5, ge=0.0)
    source_language: str = Field(default="en")
    target_languages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TARGET_LANGUAGES)
    )
    content_languages: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_CONTENT_LANGUAGES)
    )

    # Push notifications
    notification_batch_size: int = Field(default=5, ge=1)
    notification_body_max_chars: int = Field(default=100, ge=1)

    # Retention
    retention_days: int = Field(default=7, ge=1)
    retention_strategy: str = Field(default="filter", pattern="^(filter|procedure)$")
    retention_procedure: str = Field(default="delete_old_news")

    def missing_secrets(self) -> list[str]:
        missing = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if not self.firebase_service_account:
            missing.append("FIREBASE_SERVICE_ACCOUNT")
        return missing

    def validate_startup(self) -> None:
        """Fail fast when required secrets are absent outside in-memory mode."""
        if self.use_in_memory_backends:
            return
        missing = self.missing_secrets()
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
