from __future__ import annotations

from pydantic import BaseModel, Field


class HttpErrorData(BaseModel):
    """Structured data for HTTP transport errors.

    Args:
        message: Human-readable error description
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        request_id: Request ID for tracing (from X-Request-Id header)
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    method: str
    url: str
    request_id: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class HttpError(Exception):
    """Base exception for transport-level HTTP failures.

    Raised when no HTTP response was received at all. Responses with any
    status code are returned to the caller for classification.

    Attributes:
        data: Structured error data (HttpErrorData)
        message: Human-readable error description
        method: HTTP method
        url: Request URL
        request_id: Request ID for tracing
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        request_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = HttpErrorData(
            message=message,
            method=method,
            url=url,
            request_id=request_id,
            cause=cause,
        )
        self.message = self.data.message
        self.method = self.data.method
        self.url = self.data.url
        self.request_id = self.data.request_id
        self.cause = self.data.cause

        super().__init__(str(self))

    def __str__(self) -> str:
        """Format error for logging and display."""
        parts = [self.message, f"{self.method} {self.url}"]
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " | ".join(parts)


class HttpNetworkError(HttpError):
    """Network-level error (DNS, connection refused or lost, etc.)."""


class HttpTimeoutError(HttpError):
    """Request timed out."""
