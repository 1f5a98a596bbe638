from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import httpx
from pydantic import BaseModel, Field


class ApiKeyAuth(httpx.Auth, BaseModel):
    """Static API key header authentication.

    Supports both sync and async requests.

    Args:
        header_name: Header name for the API key (e.g. "x-goog-api-key")
        api_key: API key value
        prefix: Optional prefix for the key value (e.g. "Bearer")

    Example:
        >>> auth = ApiKeyAuth(header_name="x-goog-api-key", api_key="secret")
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    header_name: str
    api_key: str = Field(repr=False)  # Don't leak secrets in repr
    prefix: str | None = None

    def _value(self) -> str:
        return f"{self.prefix} {self.api_key}" if self.prefix else self.api_key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Apply API key to request (sync)."""
        request.headers[self.header_name] = self._value()
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        """Apply API key to request (async)."""
        request.headers[self.header_name] = self._value()
        yield request
