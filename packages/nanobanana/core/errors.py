"""Error taxonomy for image generation.

Every failure a caller of the generator can observe is a GenerationError
subclass carrying a stable ``kind`` and exactly one human-readable
``user_message`` suitable for display.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class GenerationErrorKind(str, Enum):
    """Stable identifiers for generation failures."""

    INVALID_REQUEST = "invalid_request"
    PROMPT_TOO_LONG = "prompt_too_long"
    IMAGE_TOO_LARGE = "image_too_large"
    INVALID_IMAGE_FORMAT = "invalid_image_format"
    INVALID_API_KEY = "invalid_api_key"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    QUOTA_EXCEEDED = "quota_exceeded"
    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    NO_IMAGE_GENERATED = "no_image_generated"
    API_ERROR = "api_error"
    CANCELLED = "cancelled"


_USER_MESSAGES: dict[GenerationErrorKind, str] = {
    GenerationErrorKind.INVALID_REQUEST: "Invalid request. Please check your input.",
    GenerationErrorKind.PROMPT_TOO_LONG: "Prompt is too long. Keep it within 2000 characters.",
    GenerationErrorKind.IMAGE_TOO_LARGE: "Image is too large. Choose an image smaller than 4MB.",
    GenerationErrorKind.INVALID_IMAGE_FORMAT: "Unsupported image format. Use a JPEG or PNG image.",
    GenerationErrorKind.INVALID_API_KEY: "Invalid API key. Please check your settings.",
    GenerationErrorKind.RATE_LIMIT_EXCEEDED: "Too many requests. Please try again later.",
    GenerationErrorKind.QUOTA_EXCEEDED: "API quota exhausted. Please check your account status.",
    GenerationErrorKind.NETWORK_ERROR: "Network error. Please check your connection.",
    GenerationErrorKind.INVALID_RESPONSE: "The server returned an invalid response.",
    GenerationErrorKind.NO_IMAGE_GENERATED: "No image was generated. Try a different prompt.",
    GenerationErrorKind.API_ERROR: "API error: {message}",
    GenerationErrorKind.CANCELLED: "The operation was cancelled.",
}


class GenerationError(Exception):
    """Base exception for all generation failures.

    Attributes:
        kind: Stable error kind
        detail: Optional diagnostic detail (not shown to users)
    """

    kind: GenerationErrorKind = GenerationErrorKind.INVALID_REQUEST

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.user_message)

    @property
    def user_message(self) -> str:
        """Human-readable message for display."""
        return _USER_MESSAGES[self.kind]


class InvalidRequestError(GenerationError):
    """Blank prompt, empty batch, or a request the provider rejected as malformed."""

    kind = GenerationErrorKind.INVALID_REQUEST


class PromptTooLongError(GenerationError):
    kind = GenerationErrorKind.PROMPT_TOO_LONG


class ImageTooLargeError(GenerationError):
    kind = GenerationErrorKind.IMAGE_TOO_LARGE


class InvalidImageFormatError(GenerationError):
    """Input image or generated payload could not be decoded."""

    kind = GenerationErrorKind.INVALID_IMAGE_FORMAT


class InvalidAPIKeyError(GenerationError):
    kind = GenerationErrorKind.INVALID_API_KEY


class RateLimitExceededError(GenerationError):
    """Provider throttled the request (HTTP 429) or the transport timed out."""

    kind = GenerationErrorKind.RATE_LIMIT_EXCEEDED


class QuotaExceededError(GenerationError):
    kind = GenerationErrorKind.QUOTA_EXCEEDED


class NetworkError(GenerationError):
    kind = GenerationErrorKind.NETWORK_ERROR


class InvalidResponseError(GenerationError):
    """Malformed or unexpected server payload, including 5xx responses."""

    kind = GenerationErrorKind.INVALID_RESPONSE


class NoImageGeneratedError(GenerationError):
    """Well-formed response that carries no inline image part."""

    kind = GenerationErrorKind.NO_IMAGE_GENERATED


class ProviderApiError(GenerationError):
    """Catch-all carrying the provider's own error message."""

    kind = GenerationErrorKind.API_ERROR

    def __init__(self, message: str) -> None:
        self.provider_message = message
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES[self.kind].format(message=self.provider_message)


class GenerationCancelledError(GenerationError):
    """A batch or edit chain was cancelled between steps.

    Attributes:
        partial_results: Images completed before cancellation, in order
    """

    kind = GenerationErrorKind.CANCELLED

    def __init__(self, partial_results: list[bytes] | None = None) -> None:
        self.partial_results: list[bytes] = list(partial_results or [])
        super().__init__(f"Cancelled after {len(self.partial_results)} completed step(s)")


def user_message_for(error: BaseException) -> str:
    """Map any exception to a display message."""
    if isinstance(error, GenerationError):
        return error.user_message
    return f"Unexpected error: {error}"


def error_summary(error: GenerationError) -> dict[str, Any]:
    """Structured fields for logging a generation failure."""
    return {"error_kind": error.kind.value, "error_detail": error.detail}
