"""Gemini image generation client.

Wires payload construction, the HTTP transport, and response parsing into
a single async call. Transport failures are translated into the generation
error taxonomy: timeouts count as provider backpressure, everything else as
a network error.
"""

from __future__ import annotations

import logging

import httpx

from nanobanana.core.api.gemini.parser import parse_response
from nanobanana.core.api.gemini.payload import build_payload
from nanobanana.core.api.http import (
    ApiKeyAuth,
    AsyncApiClient,
    HttpClientConfig,
    HttpNetworkError,
    HttpTimeoutError,
)
from nanobanana.core.api.http.utils import safe_snippet
from nanobanana.core.config.models import GeminiApiConfig
from nanobanana.core.errors import InvalidAPIKeyError, NetworkError, RateLimitExceededError

logger = logging.getLogger(__name__)


class GeminiImageClient:
    """Async client for the generateContent image endpoint.

    Args:
        http: Configured HTTP client (base URL + auth already applied).
        model: Model name used in the request path.
    """

    def __init__(self, http: AsyncApiClient, *, model: str) -> None:
        self._http = http
        self._model = model

    @classmethod
    def from_config(
        cls,
        config: GeminiApiConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GeminiImageClient:
        """Build a client from API configuration.

        Raises:
            InvalidAPIKeyError: If no API key is configured.
        """
        if not config.api_key:
            raise InvalidAPIKeyError("No API key configured")

        http_config = HttpClientConfig(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds, connect=config.connect_timeout_seconds),
            headers={"Content-Type": "application/json"},
        )
        auth = ApiKeyAuth(header_name=config.api_key_header, api_key=config.api_key)
        return cls(AsyncApiClient(http_config, auth=auth, transport=transport), model=config.model)

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint_path(self) -> str:
        return f"models/{self._model}:generateContent"

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> GeminiImageClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def generate_content(self, prompt: str, encoded_image: bytes | None = None) -> bytes:
        """Send one generation request and return the image bytes.

        Args:
            prompt: Validated prompt text.
            encoded_image: JPEG-encoded input image for edits.

        Returns:
            Generated image bytes.

        Raises:
            GenerationError: Classified transport, HTTP, or parse failure.
        """
        payload = build_payload(prompt, encoded_image)

        try:
            response = await self._http.post(self.endpoint_path, json_body=payload)
        except HttpTimeoutError as e:
            logger.warning("Generation request timed out: %s", e)
            raise RateLimitExceededError("Request timed out") from e
        except HttpNetworkError as e:
            logger.warning("Generation request failed at transport level: %s", e)
            raise NetworkError(str(e)) from e

        logger.debug(
            "generateContent returned HTTP %d (%d bytes)",
            response.status_code,
            len(response.content),
        )
        if response.status_code != 200:
            logger.debug(
                "generateContent error body: %s",
                safe_snippet(response.content, self._http.config.max_response_body_for_error),
            )
        return parse_response(response.status_code, response.content)
