"""Configuration models for nanobanana."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from nanobanana.core.caching.models import (
    DEFAULT_MEMORY_COST_LIMIT_BYTES,
    DEFAULT_MEMORY_COUNT_LIMIT,
    CacheLimits,
)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_MAX_PROMPT_CHARS = 2000
DEFAULT_MAX_IMAGE_BYTES = 4 * 1024 * 1024


class GeminiApiConfig(BaseModel):
    """Provider endpoint and credentials."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    model: str = Field(default=DEFAULT_MODEL, description="Image-capable model name")
    api_key: str | None = Field(
        default=None, repr=False, description="API key (falls back to GEMINI_API_KEY)"
    )
    api_key_header: str = Field(default="x-goog-api-key", description="Header carrying the key")
    timeout_seconds: float = Field(
        default=60.0, gt=0, description="Transport timeout; expiry maps to rate-limit-exceeded"
    )
    connect_timeout_seconds: float = Field(default=10.0, gt=0)


class CacheConfig(BaseModel):
    """Image cache configuration."""

    enabled: bool = Field(default=True, description="Disable to bypass both cache tiers")
    directory: Path = Field(
        default=Path(".cache/nanobanana/images"), description="Disk tier directory"
    )
    memory_count_limit: int = Field(default=DEFAULT_MEMORY_COUNT_LIMIT, ge=0)
    memory_cost_limit_bytes: int = Field(default=DEFAULT_MEMORY_COST_LIMIT_BYTES, ge=0)

    def limits(self) -> CacheLimits:
        return CacheLimits(
            count_limit=self.memory_count_limit,
            cost_limit_bytes=self.memory_cost_limit_bytes,
        )


class RateLimitConfig(BaseModel):
    """Outbound request spacing."""

    min_interval_seconds: float = Field(
        default=1.0, ge=0.0, description="Minimum spacing between network calls"
    )


class ValidationConfig(BaseModel):
    """Input limits enforced before any network call."""

    model_config = ConfigDict(frozen=True)

    max_prompt_chars: int = Field(default=DEFAULT_MAX_PROMPT_CHARS, gt=0)
    max_image_bytes: int = Field(
        default=DEFAULT_MAX_IMAGE_BYTES, gt=0, description="Ceiling after JPEG re-encoding"
    )
    jpeg_quality: int = Field(default=80, ge=1, le=95)


class LoggingConfig(BaseModel):
    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout when unset)")


class AppConfig(BaseModel):
    """Application configuration."""

    api: GeminiApiConfig = Field(default_factory=GeminiApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
