"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LLMSettings(BaseSettings):
    """Chat completion provider configuration.

    Targets OpenAI-compatible endpoints (OpenRouter by default, Groq works
    with a different base URL and model).
    """

    model_config = SettingsConfigDict(env_prefix="LLM_")

    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Chat completion API base URL",
    )
    model: str = Field(
        default="qwen/qwen3-coder:free",
        description="Model identifier sent with every request",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Provider API key",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )
    site_url: str = Field(
        default="http://localhost:3000",
        description="Sent as HTTP-Referer for provider attribution",
    )
    app_title: str = Field(
        default="AIFlow Runner Backend",
        description="Sent as X-Title for provider attribution",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries allowed for rate-limited requests",
    )
    backoff_base: float = Field(
        default=2.0,
        description="First backoff delay in seconds, doubled per retry",
    )
    backoff_max: float = Field(
        default=30.0,
        description="Upper bound for a single backoff delay in seconds",
    )


class BookSettings(BaseSettings):
    """Book chatbot configuration."""

    model_config = SettingsConfigDict(env_prefix="BOOK_")

    enabled: bool = Field(
        default=True,
        description="Serve book chat when no stepType is given",
    )
    chunks_path: str = Field(
        default="data/chunks.json",
        description="JSON file with book passages keyed by language",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=3001,
        description="API server port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    book: BookSettings = Field(default_factory=BookSettings)

    @property
    def is_production(self) -> bool:
        """Whether error responses must hide debugging details."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
