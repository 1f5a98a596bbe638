"""Gemini generateContent adapter: payload builder, response parser, client."""

from nanobanana.core.api.gemini.client import GeminiImageClient
from nanobanana.core.api.gemini.parser import (
    InlineImageSegment,
    TextSegment,
    classify_error_status,
    classify_part,
    extract_image,
    first_inline_image,
    parse_response,
)
from nanobanana.core.api.gemini.payload import SAFETY_SETTINGS, build_payload, build_request

__all__ = [
    "GeminiImageClient",
    "SAFETY_SETTINGS",
    "build_payload",
    "build_request",
    "parse_response",
    "extract_image",
    "classify_error_status",
    "classify_part",
    "first_inline_image",
    "TextSegment",
    "InlineImageSegment",
]
