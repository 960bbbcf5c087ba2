"""
Name: Pipeline Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match current behavior (8000-char segments, Claude Haiku)

Collaborators:
  - container.py: reads settings to pick the text-generation backend
  - crosscutting/logger.py: reads log level / JSON toggle
  - infrastructure/services/retry.py: reads retry attempts/delays

Constraints:
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROVIDERS = {"anthropic", "google", "fake"}


class Settings(BaseSettings):
    """
    Pipeline settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        log_level: Logger level (default: INFO)
        log_json: Emit JSON logs (default: True)
        llm_provider: anthropic|google|fake (default: anthropic)
        anthropic_api_key: Claude API key
        anthropic_model_id: Claude model (default: claude-3-haiku-20240307)
        anthropic_api_url: Messages API endpoint
        anthropic_version: Value for the anthropic-version header
        google_api_key: Google Gemini API key
        google_model_id: Gemini model (default: gemini-1.5-flash)
        llm_max_tokens: Max output tokens per call (default: 1500)
        llm_temperature: Sampling temperature (default: 0.2)
        llm_timeout_seconds: Per-call timeout (default: 60)
        render_html: Normalize markdown output to HTML (default: True)
        max_segment_size: Characters per segment (default: 8000)
        prompt_version: System prompt version (default: v1)
        prompt_lang: System prompt language (default: en)
        retry_max_attempts: Attempts for transient backend errors (default: 3)
        retry_base_delay_seconds: Initial backoff (default: 1.0)
        retry_max_delay_seconds: Max backoff (default: 30.0)
    """

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Text generation backend
    llm_provider: str = "anthropic"

    anthropic_api_key: str = ""
    anthropic_model_id: str = "claude-3-haiku-20240307"
    anthropic_api_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_version: str = "2023-06-01"

    google_api_key: str = ""
    google_model_id: str = "gemini-1.5-flash"

    llm_max_tokens: int = 1500
    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 60.0
    render_html: bool = True

    # Splitting (defaults match current behavior)
    max_segment_size: int = 8000

    # Prompts
    prompt_version: str = "v1"
    prompt_lang: str = "en"

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    @field_validator("llm_provider")
    @classmethod
    def llm_provider_valid(cls, v: str) -> str:
        provider = (v or "").strip().lower()
        if provider not in _PROVIDERS:
            raise ValueError("llm_provider must be anthropic, google, or fake")
        return provider

    @field_validator("max_segment_size")
    @classmethod
    def max_segment_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_segment_size must be greater than 0")
        return v

    @field_validator("llm_max_tokens")
    @classmethod
    def llm_max_tokens_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("llm_max_tokens must be greater than 0")
        return v

    @field_validator("llm_temperature")
    @classmethod
    def llm_temperature_valid(cls, v: float) -> float:
        if v < 0 or v > 2:
            raise ValueError("llm_temperature must be between 0 and 2")
        return v

    @field_validator("llm_timeout_seconds")
    @classmethod
    def llm_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("llm_timeout_seconds must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_ai_requirements(self):
        if self.llm_provider == "anthropic" and not self.anthropic_api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY is required when LLM_PROVIDER=anthropic"
            )
        if self.llm_provider == "google" and not self.google_api_key:
            raise ValueError("GOOGLE_API_KEY is required when LLM_PROVIDER=google")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
