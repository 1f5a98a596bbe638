"""Data models for image generation workflows."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """A validated single generation request.

    Attributes:
        prompt: Prompt text as supplied by the caller (non-blank)
        input_image: Caller's raw image bytes, used for the cache key
        encoded_image: JPEG re-encoding of input_image, sent on the wire
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(min_length=1)
    input_image: bytes | None = Field(default=None, repr=False)
    encoded_image: bytes | None = Field(default=None, repr=False)


class GeneratedImage(BaseModel):
    """A history record for one successful generation."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    image_bytes: bytes = Field(repr=False)
    prompt: str
    source_input_image: bytes | None = Field(default=None, repr=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class BatchProgress(BaseModel):
    """Counters for a running batch."""

    completed: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    succeeded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total

    @property
    def done(self) -> bool:
        return self.total > 0 and self.completed >= self.total


class CancellationToken:
    """Cooperative cancellation flag checked between workflow steps."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Suspend until cancel() is called."""
        await self._event.wait()
