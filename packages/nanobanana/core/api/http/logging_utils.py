"""Debug logging for single HTTP exchanges.

Configured credential headers are masked before they reach a record.
Bodies are never logged; Gemini payloads carry base64 image data, so
only the response size is recorded.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from pydantic import BaseModel, Field

logger = logging.getLogger("nanobanana.core.api.http")

REDACTED = "***REDACTED***"


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Copy headers, masking any whose name is in redact (case-insensitive)."""
    masked = {name.lower() for name in redact}
    return {k: REDACTED if k.lower() in masked else v for k, v in headers.items()}


class HttpExchangeLog(BaseModel):
    """One request/response pair, timed from construction."""

    method: str
    url: str
    request_id: str
    started_at: float = Field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def _fields(self) -> dict[str, object]:
        return {"method": self.method, "url": self.url, "request_id": self.request_id}

    def sent(self, headers: Mapping[str, str], redact: tuple[str, ...]) -> None:
        logger.debug(
            "HTTP request",
            extra={**self._fields(), "headers": redact_headers(headers, redact)},
        )

    def received(self, status_code: int, body_size: int) -> None:
        logger.debug(
            "HTTP response",
            extra={
                **self._fields(),
                "status_code": status_code,
                "body_bytes": body_size,
                "elapsed_ms": self.elapsed_ms,
            },
        )

    def failed(self, reason: str) -> None:
        logger.debug(
            "HTTP transport failure: %s",
            reason,
            extra={**self._fields(), "elapsed_ms": self.elapsed_ms},
        )
