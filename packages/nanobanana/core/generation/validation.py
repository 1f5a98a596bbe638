"""Request validation performed before any cache or network access."""

from __future__ import annotations

import logging

from nanobanana.core.config.models import ValidationConfig
from nanobanana.core.errors import (
    ImageTooLargeError,
    InvalidImageFormatError,
    InvalidRequestError,
    PromptTooLongError,
)
from nanobanana.core.generation.models import GenerationRequest
from nanobanana.core.imaging import ImageDecodeError, ImagePixelLimitError, encode_jpeg

logger = logging.getLogger(__name__)


def validate_prompt(prompt: str, config: ValidationConfig) -> None:
    """Check prompt is non-blank and within the length limit.

    Raises:
        InvalidRequestError: Prompt is empty after trimming whitespace.
        PromptTooLongError: Prompt exceeds config.max_prompt_chars.
    """
    if not prompt or not prompt.strip():
        raise InvalidRequestError("Prompt is blank")
    if len(prompt) > config.max_prompt_chars:
        raise PromptTooLongError(
            f"Prompt has {len(prompt)} characters (limit {config.max_prompt_chars})"
        )


def encode_input_image(image: bytes, config: ValidationConfig) -> bytes:
    """Re-encode an input image as JPEG and enforce the size ceiling.

    Raises:
        InvalidImageFormatError: Image bytes cannot be decoded.
        ImageTooLargeError: Image exceeds the decoder pixel limit, or its JPEG
            re-encoding exceeds config.max_image_bytes.
    """
    try:
        encoded = encode_jpeg(image, quality=config.jpeg_quality)
    except ImagePixelLimitError as e:
        raise ImageTooLargeError(str(e)) from e
    except ImageDecodeError as e:
        raise InvalidImageFormatError(str(e)) from e

    if len(encoded) > config.max_image_bytes:
        raise ImageTooLargeError(
            f"Encoded image is {len(encoded)} bytes (limit {config.max_image_bytes})"
        )
    return encoded


def validate_request(
    prompt: str,
    input_image: bytes | None = None,
    config: ValidationConfig | None = None,
) -> GenerationRequest:
    """Validate a prompt and optional input image.

    Args:
        prompt: Prompt text.
        input_image: Optional raw image bytes (any Pillow-readable format).
        config: Validation limits (defaults apply when omitted).

    Returns:
        GenerationRequest carrying the JPEG-encoded image for upload.
    """
    config = config or ValidationConfig()
    validate_prompt(prompt, config)

    encoded = encode_input_image(input_image, config) if input_image is not None else None
    return GenerationRequest(prompt=prompt, input_image=input_image, encoded_image=encoded)
