"""Pydantic-based settings for pot-api."""

import os
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for pot-api."""

    model_config = SettingsConfigDict(
        env_file=os.getenv("SETTINGS_ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Service settings
    host: str = Field(default="127.0.0.1", validation_alias=AliasChoices("POT_API_HOST", "host"))
    port: int = Field(default=3141, validation_alias=AliasChoices("PORT", "port"))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("POT_API_LOG_LEVEL", "log_level"))

    # Job store
    redis_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("REDIS_URL", "redis_url"))
    redis_key_prefix: str = Field(
        default="pot-api:jobs",
        validation_alias=AliasChoices("POT_API_REDIS_KEY_PREFIX", "redis_key_prefix"),
    )
    job_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        validation_alias=AliasChoices("POT_API_JOB_TTL_SECONDS", "job_ttl_seconds"),
        description="Redis expiry, refreshed on every write",
    )
    job_retention_seconds: int = Field(
        default=60 * 60,
        validation_alias=AliasChoices("POT_API_JOB_RETENTION_SECONDS", "job_retention_seconds"),
        description="In-memory retention measured from creation",
    )
    sweep_interval_seconds: int = Field(
        default=10 * 60,
        validation_alias=AliasChoices("POT_API_SWEEP_INTERVAL_SECONDS", "sweep_interval_seconds"),
    )

    # Background execution
    webhook_timeout: float = Field(
        default=10.0, validation_alias=AliasChoices("POT_API_WEBHOOK_TIMEOUT", "webhook_timeout")
    )
    max_concurrent_jobs: Optional[int] = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("POT_API_MAX_CONCURRENT_JOBS", "max_concurrent_jobs"),
        description="Unset means every job runs immediately",
    )
    shutdown_grace_seconds: float = Field(
        default=5.0,
        validation_alias=AliasChoices("POT_API_SHUTDOWN_GRACE_SECONDS", "shutdown_grace_seconds"),
    )

    # Verification engine
    engine_url: str = Field(
        default="http://localhost:8080", validation_alias=AliasChoices("POT_ENGINE_URL", "engine_url")
    )
    anthropic_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("ANTHROPIC_API_KEY", "anthropic_api_key")
    )
    xai_api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("XAI_API_KEY", "xai_api_key"))
    deepseek_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DEEPSEEK_API_KEY", "deepseek_api_key")
    )
    moonshot_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MOONSHOT_API_KEY", "moonshot_api_key")
    )
