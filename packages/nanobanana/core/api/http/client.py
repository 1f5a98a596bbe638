"""Async HTTP client wrapper built on HTTPX.

Provides:
- Structured transport errors (network failure vs timeout)
- Request/response logging with header redaction
- Auth integration (API key header)

Responses are returned for every status code; classifying non-2xx
statuses is left to the API-specific layer, which knows the provider's
error envelope. Requests are never retried.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

import httpx

from nanobanana.core.api.http.config import HttpClientConfig
from nanobanana.core.api.http.errors import HttpError, HttpNetworkError, HttpTimeoutError
from nanobanana.core.api.http.logging_utils import HttpExchangeLog
from nanobanana.core.api.http.utils import join_url


def _merge_headers(base: Mapping[str, str], extra: Mapping[str, str] | None) -> dict[str, str]:
    """Merge base headers with request-specific headers."""
    out = dict(base)
    if extra:
        out.update(extra)
    return out


def _default_request_id() -> str:
    """Generate a random request ID."""
    return f"req_{uuid.uuid4().hex[:16]}"


def _build_transport_error(
    *,
    exc_type: type[HttpError],
    message: str,
    method: str,
    url: str,
    request_id: str | None,
    cause: BaseException,
) -> HttpError:
    return exc_type(
        message=message,
        method=method,
        url=url,
        request_id=request_id,
        cause=cause,
    )


class AsyncApiClient:
    """Asynchronous HTTP API client.

    Built on httpx.AsyncClient with structured transport errors and
    redacted debug logging.

    Args:
        config: Client configuration
        auth: Optional authentication handler (e.g. ApiKeyAuth)
        transport: Optional custom transport (useful for testing)

    Example:
        >>> config = HttpClientConfig(base_url="https://api.example.com")
        >>> async with AsyncApiClient(config) as client:
        ...     resp = await client.post("/v1/things", json_body={"a": 1})
    """

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.auth = auth
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent, **config.headers},
            timeout=config.timeout,
            limits=config.limits,
            follow_redirects=config.follow_redirects,
            auth=auth,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Response:
        """Send a single request.

        Args:
            method: HTTP method
            path: Request path (relative to base_url)
            headers: Extra request headers
            json_body: JSON-serializable request body
            timeout: Per-request timeout override

        Returns:
            HTTP response, whatever its status code

        Raises:
            HttpTimeoutError: If the request timed out
            HttpNetworkError: On any other transport failure
        """
        method_u = method.upper()
        url = join_url(str(self._client.base_url), path)
        req_id = headers.get("X-Request-Id") if headers else None
        req_id = req_id or _default_request_id()

        merged_headers = _merge_headers(self._client.headers, headers)
        merged_headers.setdefault("X-Request-Id", req_id)

        exchange = HttpExchangeLog(method=method_u, url=url, request_id=req_id)
        exchange.sent(merged_headers, self.config.redact_headers)

        try:
            resp = await self._client.request(
                method_u,
                url,
                headers=merged_headers,
                json=json_body,
                timeout=timeout or self.config.timeout,
            )
        except httpx.TimeoutException as e:
            exchange.failed("timeout")
            raise _build_transport_error(
                exc_type=HttpTimeoutError,
                message="Request timed out",
                method=method_u,
                url=url,
                request_id=req_id,
                cause=e,
            ) from e
        except httpx.RequestError as e:
            exchange.failed(type(e).__name__)
            raise _build_transport_error(
                exc_type=HttpNetworkError,
                message="Network error while sending request",
                method=method_u,
                url=url,
                request_id=req_id,
                cause=e,
            ) from e

        exchange.received(resp.status_code, len(resp.content))
        return resp

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async POST request.

        Args:
            path: Request path (relative to base_url)
            **kwargs: Additional arguments passed to request()

        Returns:
            HTTP response

        Raises:
            HttpError: On transport failure
        """
        return await self.request("POST", path, **kwargs)
