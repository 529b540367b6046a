"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Provider keys (at least one, depending on the model in use):
        - ANTHROPIC_API_KEY: Anthropic key for Claude models
        - OPENAI_API_KEY: OpenAI key for GPT models

    Optional environment variables:
        - DEFAULT_MODEL: Model used when none is requested
        - BASIC_AUTH_USERNAME / BASIC_AUTH_PASSWORD: HTTP API credentials
        - ALGOLIA_APP_ID / ALGOLIA_WRITE_KEY: Default index credentials for the CLI
        - ENVIRONMENT: Environment name (development, staging, production)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Basic Auth (HTTP API)
    # ==========================================================================
    basic_auth_username: str = Field(default="", description="Username for HTTP Basic auth")
    basic_auth_password: str = Field(default="", description="Password for HTTP Basic auth")

    # ==========================================================================
    # LLM Providers
    # ==========================================================================
    anthropic_api_key: str = Field(default="", description="Anthropic API key for Claude models")
    openai_api_key: str = Field(default="", description="OpenAI API key for GPT models")
    default_model: str = Field(
        default="claude-3-5-haiku-latest",
        description="Model used when a caller does not request one"
    )
    generation_max_tokens: int = Field(
        default=1000,
        description="Max completion tokens per configuration generation call"
    )
    generation_temperature: float = Field(
        default=0.1,
        description="Sampling temperature for configuration generation"
    )
    llm_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for a single model call (seconds)"
    )

    # ==========================================================================
    # Record Sampling
    # ==========================================================================
    default_sample_limit: int = Field(
        default=10,
        description="Number of records sent to the model by default"
    )
    max_sample_records: int = Field(
        default=100,
        description="Upper bound on records accepted for one analysis"
    )

    # ==========================================================================
    # Algolia
    # ==========================================================================
    algolia_app_id: str = Field(default="", description="Default Algolia application ID")
    algolia_write_key: str = Field(default="", description="Default Algolia admin/write API key")
    hits_page_size: int = Field(
        default=100,
        description="Number of hits returned by the index browse endpoint"
    )

    @property
    def has_algolia_credentials(self) -> bool:
        return bool(self.algolia_app_id and self.algolia_write_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.
    """
    test_defaults = {
        "anthropic_api_key": "test-anthropic-key",
        "openai_api_key": "test-openai-key",
        "basic_auth_username": "admin",
        "basic_auth_password": "secret",
        "environment": "testing",
        "debug": True,
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)


def provider_key(settings: Settings, provider: str) -> Optional[str]:
    """Return the configured API key for a provider, or None when unset."""
    key = {
        "anthropic": settings.anthropic_api_key,
        "openai": settings.openai_api_key,
    }.get(provider, "")
    return key or None
