"""
Application configuration using pydantic-settings.

Loads configuration from environment variables and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Completion provider (any OpenAI-compatible chat completions endpoint)
    completion_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat completions API",
    )
    completion_api_key: str = Field(
        default="",
        description="Bearer token for the completion provider (empty disables auth header)",
    )
    completion_model: str = Field(
        default="gpt-3.5-turbo",
        description="Model name sent with every completion request",
    )
    completion_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound in seconds for a single completion call",
    )
    completion_temperature: float = Field(default=0.9, ge=0.0, le=2.0)
    completion_max_tokens: int = Field(default=350, gt=0)
    completion_presence_penalty: float = Field(default=0.7, ge=-2.0, le=2.0)
    completion_frequency_penalty: float = Field(default=0.5, ge=-2.0, le=2.0)

    # Conversation memory
    history_cap: int = Field(
        default=10,
        description="Maximum number of turns kept per session after an exchange",
    )
    session_idle_timeout: float | None = Field(
        default=None,
        description="Seconds of inactivity after which a session is ended (None disables eviction)",
    )
    idle_sweep_interval: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between idle-session sweeps when eviction is enabled",
    )

    # Document storage
    document_store_url: str | None = Field(
        default=None,
        description="SQLAlchemy async URL for the document store (None keeps documents in memory)",
    )

    # HTTP API
    api_host: str = Field(default="127.0.0.1", description="Bind address for --mode api")
    api_port: int = Field(default=8000, description="Bind port for --mode api")

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
