"""Wire models for the Gemini generateContent endpoint.

Request models serialize with the snake_case keys the endpoint accepts for
uploads; response models accept both the camelCase keys the endpoint
returns and their snake_case spellings. Unknown response fields are
ignored.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class HarmCategory(str, Enum):
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"


class HarmBlockThreshold(str, Enum):
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"


# ============================================================================
# Request
# ============================================================================


class SafetySetting(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category: HarmCategory
    threshold: HarmBlockThreshold = HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE


class InlineDataPayload(BaseModel):
    """Base64 image blob sent with an edit request."""

    mime_type: str = "image/jpeg"
    data: str = Field(repr=False)


class RequestPart(BaseModel):
    """One request part: either text or inline image data."""

    text: str | None = None
    inline_data: InlineDataPayload | None = None


class RequestContent(BaseModel):
    parts: list[RequestPart]


class GenerateContentRequest(BaseModel):
    """Full request body."""

    model_config = ConfigDict(populate_by_name=True)

    contents: list[RequestContent]
    safety_settings: list[SafetySetting] = Field(serialization_alias="safetySettings")

    def to_wire(self) -> dict:
        """Serialize to the JSON body sent over the wire."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ============================================================================
# Response
# ============================================================================


class InlineData(BaseModel):
    """Base64 blob returned in a response part."""

    model_config = ConfigDict(extra="ignore")

    mime_type: str = Field(
        default="image/png", validation_alias=AliasChoices("mimeType", "mime_type")
    )
    data: str = Field(repr=False)


class ResponsePart(BaseModel):
    """A response part may carry text, inline data, or both."""

    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    inline_data: InlineData | None = Field(
        default=None, validation_alias=AliasChoices("inlineData", "inline_data")
    )


class ResponseContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: list[ResponsePart] = Field(default_factory=list)


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: ResponseContent | None = None
    finish_reason: str | None = Field(
        default=None, validation_alias=AliasChoices("finishReason", "finish_reason")
    )


class GenerateContentResponse(BaseModel):
    """Response envelope. ``candidates`` is required."""

    model_config = ConfigDict(extra="ignore")

    candidates: list[Candidate]


class ErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | None = None
    status: str | None = None


class ErrorEnvelope(BaseModel):
    """Provider error envelope: ``{"error": {"message": ...}}``."""

    model_config = ConfigDict(extra="ignore")

    error: ErrorBody
