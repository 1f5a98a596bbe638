"""Configuration management for nanobanana."""

from nanobanana.core.config.loader import (
    detect_format,
    get_api_key_from_env,
    load_app_config,
    load_config,
)
from nanobanana.core.config.models import (
    AppConfig,
    CacheConfig,
    GeminiApiConfig,
    LoggingConfig,
    RateLimitConfig,
    ValidationConfig,
)

__all__ = [
    "AppConfig",
    "CacheConfig",
    "GeminiApiConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "ValidationConfig",
    "detect_format",
    "get_api_key_from_env",
    "load_app_config",
    "load_config",
]
