"""Thin async HTTPX wrapper.

Exposes a small, ergonomic surface:
- AsyncApiClient: single-shot async client (no retries)
- HttpClientConfig: configuration
- Exceptions: HttpError and subclasses
- ApiKeyAuth: static API key header
"""

from nanobanana.core.api.http.auth import ApiKeyAuth
from nanobanana.core.api.http.client import AsyncApiClient
from nanobanana.core.api.http.config import HttpClientConfig
from nanobanana.core.api.http.errors import HttpError, HttpNetworkError, HttpTimeoutError

__all__ = [
    "AsyncApiClient",
    "HttpClientConfig",
    "ApiKeyAuth",
    "HttpError",
    "HttpNetworkError",
    "HttpTimeoutError",
]
