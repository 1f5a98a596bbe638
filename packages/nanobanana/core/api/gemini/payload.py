"""Request payload construction for generateContent."""

from __future__ import annotations

import base64

from nanobanana.core.api.gemini.models import (
    GenerateContentRequest,
    HarmCategory,
    InlineDataPayload,
    RequestContent,
    RequestPart,
    SafetySetting,
)

SAFETY_SETTINGS: tuple[SafetySetting, ...] = (
    SafetySetting(category=HarmCategory.HATE_SPEECH),
    SafetySetting(category=HarmCategory.DANGEROUS_CONTENT),
    SafetySetting(category=HarmCategory.HARASSMENT),
    SafetySetting(category=HarmCategory.SEXUALLY_EXPLICIT),
)


def build_request(prompt: str, encoded_image: bytes | None = None) -> GenerateContentRequest:
    """Build the typed request for a prompt and optional JPEG input.

    With an input image the image part comes first, then the text part.

    Args:
        prompt: Prompt text.
        encoded_image: JPEG bytes already re-encoded for upload.

    Returns:
        GenerateContentRequest with the fixed safety settings attached.
    """
    parts: list[RequestPart] = []
    if encoded_image is not None:
        parts.append(
            RequestPart(
                inline_data=InlineDataPayload(
                    mime_type="image/jpeg",
                    data=base64.b64encode(encoded_image).decode("ascii"),
                )
            )
        )
    parts.append(RequestPart(text=prompt))

    return GenerateContentRequest(
        contents=[RequestContent(parts=parts)],
        safety_settings=list(SAFETY_SETTINGS),
    )


def build_payload(prompt: str, encoded_image: bytes | None = None) -> dict:
    """Build the JSON body for a generateContent call."""
    return build_request(prompt, encoded_image).to_wire()
