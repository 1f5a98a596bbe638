"""No-op cache for development/testing.

Always reports cache miss, discards all stores.
"""

from nanobanana.core.caching.models import CacheKey, CacheWriteResult


class NullImageCache:
    """
    No-op async image cache.

    Used when caching is disabled in configuration.
    """

    async def lookup(self, prompt: str, input_image: bytes | None = None) -> bytes | None:
        """Always returns None (async)."""
        return None

    async def store(
        self, prompt: str, input_image: bytes | None, image_bytes: bytes
    ) -> CacheWriteResult:
        """Discard (async)."""
        return CacheWriteResult(key=CacheKey.for_request(prompt, input_image))

    async def clear(self) -> None:
        """No-op (async)."""

    async def size(self) -> int:
        """Always zero (async)."""
        return 0
