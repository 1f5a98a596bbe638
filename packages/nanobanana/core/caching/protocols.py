"""Protocols for image cache backends.

Defines the async-first cache protocol consumed by the generator.
"""

from typing import Protocol

from .models import CacheWriteResult


class Cache(Protocol):
    """
    Protocol for image caches (async-first).

    All implementations must support:
    - Deterministic lookups for identical request material
    - Best-effort stores that never raise on I/O failure
    - Miss-on-error semantics (corruption → cache miss)
    """

    async def lookup(self, prompt: str, input_image: bytes | None = None) -> bytes | None:
        """
        Return cached image bytes for a request, or None on miss.

        Args:
            prompt: Prompt text
            input_image: Raw input image bytes (optional)

        Returns:
            Cached image bytes, or None on miss/error
        """
        ...

    async def store(
        self, prompt: str, input_image: bytes | None, image_bytes: bytes
    ) -> CacheWriteResult:
        """
        Store generated image bytes for a request (overwrites).

        Returns:
            Outcome of the write; failures are reported, not raised
        """
        ...

    async def clear(self) -> None:
        """Evict all entries, leaving an empty usable cache."""
        ...

    async def size(self) -> int:
        """Return the on-disk footprint in bytes."""
        ...
