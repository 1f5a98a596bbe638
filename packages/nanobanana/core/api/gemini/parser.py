"""Response classification and image extraction for generateContent.

Non-200 statuses are mapped onto the generation error taxonomy using the
provider's error message where one is present. For 200 responses, each
content part is classified as text or inline image and the first inline
image wins.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from nanobanana.core.api.gemini.models import (
    ErrorEnvelope,
    GenerateContentResponse,
    ResponsePart,
)
from nanobanana.core.errors import (
    GenerationError,
    InvalidAPIKeyError,
    InvalidImageFormatError,
    InvalidRequestError,
    InvalidResponseError,
    NoImageGeneratedError,
    ProviderApiError,
    QuotaExceededError,
    RateLimitExceededError,
)
from nanobanana.core.imaging import ImageDecodeError, decode_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class InlineImageSegment:
    mime_type: str
    data: str


Segment = TextSegment | InlineImageSegment


def classify_part(part: ResponsePart) -> Segment:
    """Classify a response part. Inline data takes precedence over text."""
    if part.inline_data is not None:
        return InlineImageSegment(mime_type=part.inline_data.mime_type, data=part.inline_data.data)
    return TextSegment(text=part.text or "")


def first_inline_image(parts: list[ResponsePart]) -> InlineImageSegment | None:
    """Return the first inline image segment in order, else None."""
    for part in parts:
        segment = classify_part(part)
        if isinstance(segment, InlineImageSegment):
            return segment
    return None


def extract_error_message(body: bytes) -> str | None:
    """Pull ``error.message`` out of a provider error body, if parseable."""
    if not body:
        return None
    try:
        envelope = ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        return None
    return envelope.error.message


def classify_error_status(status_code: int, body: bytes) -> GenerationError:
    """Map a non-200 response to a generation error.

    Args:
        status_code: HTTP status code (not 200).
        body: Raw response body.

    Returns:
        The error to raise.
    """
    message = extract_error_message(body)

    if status_code == 400:
        if message is None:
            return InvalidRequestError("HTTP 400 without a provider message")
        if "API key" in message:
            return InvalidAPIKeyError(message)
        return ProviderApiError(message)
    if status_code == 401:
        return InvalidAPIKeyError(message)
    if status_code == 403:
        if message is not None and "quota" in message:
            return QuotaExceededError(message)
        return InvalidAPIKeyError(message)
    if status_code == 429:
        return RateLimitExceededError(message)
    if 500 <= status_code < 600:
        return InvalidResponseError(f"HTTP {status_code}: {message or 'server error'}")
    if message is not None:
        return ProviderApiError(message)
    return InvalidResponseError(f"Unexpected HTTP status {status_code}")


def extract_image(body: bytes) -> bytes:
    """Decode a 200 response body into image bytes.

    Raises:
        InvalidResponseError: Body is not a valid response envelope.
        NoImageGeneratedError: No candidate, or no part with inline data.
        InvalidImageFormatError: Payload is not valid base64 or not an image.
    """
    try:
        response = GenerateContentResponse.model_validate_json(body)
    except ValidationError as e:
        raise InvalidResponseError(
            f"Malformed response envelope: {e.error_count()} error(s)"
        ) from e

    if not response.candidates:
        raise NoImageGeneratedError("Response has no candidates")

    candidate = response.candidates[0]
    parts = candidate.content.parts if candidate.content is not None else []
    logger.debug(
        "Candidate has %d part(s), finish_reason=%s", len(parts), candidate.finish_reason
    )

    segment = first_inline_image(parts)
    if segment is None:
        texts = [p.text for p in parts if p.text]
        if texts:
            logger.info("Model replied with text only: %s", texts[0][:200])
        raise NoImageGeneratedError(
            f"No inline image part (finish_reason={candidate.finish_reason})"
        )

    try:
        image_bytes = base64.b64decode(segment.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageFormatError("Inline data is not valid base64") from e

    try:
        decode_image(image_bytes)
    except ImageDecodeError as e:
        raise InvalidImageFormatError(str(e)) from e

    logger.debug("Extracted %s image (%d bytes)", segment.mime_type, len(image_bytes))
    return image_bytes


def parse_response(status_code: int, body: bytes) -> bytes:
    """Classify an HTTP result and return the generated image bytes.

    Args:
        status_code: HTTP status code.
        body: Raw response body.

    Returns:
        Image bytes from the first inline image part.

    Raises:
        GenerationError: The classified failure.
    """
    if status_code != 200:
        raise classify_error_status(status_code, body)
    return extract_image(body)
